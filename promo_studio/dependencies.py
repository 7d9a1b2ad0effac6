"""
Dependency Injection - shared service instances
"""

from typing import Optional

from .gemini_client import AsyncGeminiClient, AsyncContentGenerator, AsyncVideoJobManager
from .services import (
    ContentGenerationService,
    MediaStore,
    VideoOperationPoller,
    ViewStateStore,
)


# Process-wide singletons
_gemini_client: Optional[AsyncGeminiClient] = None
_view_state_store: Optional[ViewStateStore] = None
_media_store: Optional[MediaStore] = None
_content_service: Optional[ContentGenerationService] = None
_video_poller: Optional[VideoOperationPoller] = None


def get_gemini_client() -> AsyncGeminiClient:
    """Shared client, so requests reuse one connection pool"""
    global _gemini_client

    if _gemini_client is None:
        _gemini_client = AsyncGeminiClient()

    return _gemini_client


def get_view_state_store() -> ViewStateStore:
    global _view_state_store

    if _view_state_store is None:
        _view_state_store = ViewStateStore()

    return _view_state_store


def get_media_store() -> MediaStore:
    global _media_store

    if _media_store is None:
        _media_store = MediaStore()

    return _media_store


def get_content_service() -> ContentGenerationService:
    global _content_service

    if _content_service is None:
        _content_service = ContentGenerationService(
            generator=AsyncContentGenerator(get_gemini_client()),
            store=get_view_state_store(),
        )

    return _content_service


def get_video_poller() -> VideoOperationPoller:
    global _video_poller

    if _video_poller is None:
        _video_poller = VideoOperationPoller(
            jobs=AsyncVideoJobManager(get_gemini_client()),
            store=get_view_state_store(),
            media=get_media_store(),
        )

    return _video_poller


async def cleanup() -> None:
    """Stop polling and close the HTTP client"""
    global _gemini_client, _video_poller, _content_service

    if _video_poller:
        await _video_poller.close()
        _video_poller = None

    _content_service = None

    if _gemini_client:
        await _gemini_client.close()
        _gemini_client = None
