"""
Health check and configuration endpoints.

Provides simple endpoints for monitoring and frontend configuration.
"""

from fastapi import APIRouter, Depends

from scrummer.core.config import VERSION, Settings
from scrummer.core.dependencies import get_settings
from scrummer.models.schemas import ConfigResponse, HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Return API health status."""
    return HealthResponse(status="ok", version=VERSION)


@router.get("/config", response_model=ConfigResponse)
async def get_config(settings: Settings = Depends(get_settings)) -> ConfigResponse:
    """Return history settings the frontend needs to explain dedup behavior."""
    return ConfigResponse(
        history_limit=settings.history_limit,
        dedup_window_seconds=settings.dedup_window_seconds,
        version=VERSION,
    )
