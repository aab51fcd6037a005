"""API Pydantic models."""

from .responses import ErrorCodes, ErrorResponse, HealthResponse, HoursReportResponse

__all__ = ["HealthResponse", "HoursReportResponse", "ErrorResponse", "ErrorCodes"]
