"""
Services - business logic layer
"""

from .view_state import StorageKey, ViewStateStore
from .media_store import MediaStore
from .content_service import ContentGenerationService
from .video_poller import VideoOperationPoller

__all__ = [
    "StorageKey",
    "ViewStateStore",
    "MediaStore",
    "ContentGenerationService",
    "VideoOperationPoller",
]
