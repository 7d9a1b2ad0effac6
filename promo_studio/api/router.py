"""
API Router - main route configuration

- Health:  /api/health, /api/config
- Content: /api/content/{kind}
- Video:   /api/video
"""

from fastapi import APIRouter

from .health import router as health_router
from .content import router as content_router
from .video import router as video_router

api_router = APIRouter(prefix="/api")

api_router.include_router(health_router)
api_router.include_router(content_router)
api_router.include_router(video_router)
