"""
Health Check API
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from datetime import datetime

from ..config import Settings, get_settings

router = APIRouter(tags=["Health"])


class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    version: str
    timestamp: datetime
    gemini_api_configured: bool


class ConfigResponse(BaseModel):
    """Public configuration, never includes the API key"""
    gemini_api_base_url: str
    text_model: str
    image_model: str
    video_model: str
    video_poll_interval: float
    video_poll_timeout: float
    media_dir: str
    debug: bool


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: Settings = Depends(get_settings)):
    """Service status and version"""
    from .. import __version__

    return HealthResponse(
        status="healthy",
        version=__version__,
        timestamp=datetime.now(),
        gemini_api_configured=bool(settings.gemini_api_key),
    )


@router.get("/config", response_model=ConfigResponse)
async def get_config(settings: Settings = Depends(get_settings)):
    """Public configuration"""
    return ConfigResponse(
        gemini_api_base_url=settings.gemini_api_base_url,
        text_model=settings.text_model,
        image_model=settings.image_model,
        video_model=settings.video_model,
        video_poll_interval=settings.video_poll_interval,
        video_poll_timeout=settings.video_poll_timeout,
        media_dir=str(settings.media_dir),
        debug=settings.debug,
    )
