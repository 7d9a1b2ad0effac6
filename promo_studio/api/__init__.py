"""
HTTP API routers
"""

from .router import api_router

__all__ = ["api_router"]
