"""
Health check endpoint.

Reports whether the gateway credentials are present, never their values.
"""

from fastapi import APIRouter

from cardcheckout import __version__
from cardcheckout.api.schemas import HealthResponse
from cardcheckout.config import get_settings

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Check system health and configuration."""
    settings = get_settings()

    return HealthResponse(
        status="healthy",
        version=__version__,
        gateway_configured=settings.gateway_configured,
        public_key_configured=settings.public_key_configured,
    )
