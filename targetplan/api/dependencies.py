"""Service dependencies for FastAPI endpoints."""

from fastapi import Depends

from targetplan.core.config import Settings, get_settings
from targetplan.services.pacing_service import PacingService


def get_pacing_service(settings: Settings = Depends(get_settings)) -> PacingService:
    """Build a stateless pacing service bound to the current settings."""

    return PacingService(settings)
