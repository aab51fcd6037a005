"""Pydantic response models for API endpoints."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response."""

    status: str  # "healthy" or "unhealthy"
    version: str
    taxonomy_available: bool
    client_count: int = 0
    timestamp: str  # ISO 8601 UTC
    error: str | None = None


class SummaryHours(BaseModel):
    summary: str
    hours: float
    count: int


class ClientHours(BaseModel):
    client: str
    weekStart: str
    hours: float
    count: int
    summaries: list[SummaryHours] = []


class WeekHours(BaseModel):
    weekStart: str
    clients: list[ClientHours] = []


class HoursReportResponse(BaseModel):
    """Weekly client hours, newest week first."""

    weeks: list[WeekHours] = []


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    code: str
    details: list[str] = []


class ErrorCodes:
    """Error code constants."""

    INVALID_REQUEST = "INVALID_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    UNSUPPORTED_MEDIA_TYPE = "UNSUPPORTED_MEDIA_TYPE"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
