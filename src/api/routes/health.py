"""Health check endpoint."""

from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from api.models.responses import HealthResponse
from core import config
from core.taxonomy import load_client_rules

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint for monitoring.

    Returns 200 if the client taxonomy loads, 503 otherwise.
    """
    timestamp = datetime.now(timezone.utc).isoformat()

    try:
        rules = load_client_rules(config.CLIENTS_PATH)
    except config.ConfigurationError as e:
        return JSONResponse(
            status_code=503,
            content=HealthResponse(
                status="unhealthy",
                version=config.API_VERSION,
                taxonomy_available=False,
                timestamp=timestamp,
                error=str(e),
            ).model_dump(),
        )

    return HealthResponse(
        status="healthy",
        version=config.API_VERSION,
        taxonomy_available=True,
        client_count=len(rules),
        timestamp=timestamp,
    )
