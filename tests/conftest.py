"""Pytest configuration and shared fixtures."""

import os
import tempfile
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

# Settings are read once per process; keep the default storage out of the repo
_TEST_STORAGE = Path(tempfile.mkdtemp(prefix="promo-studio-tests-"))
os.environ["STATE_FILE"] = str(_TEST_STORAGE / "view_state.json")
os.environ["MEDIA_DIR"] = str(_TEST_STORAGE / "media")
os.environ.setdefault("GEMINI_API_KEY", "test-key")

from promo_studio.config import Settings
from promo_studio.gemini_client import AsyncVideoJobManager
from promo_studio.services import MediaStore, VideoOperationPoller, ViewStateStore


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at a per-test storage directory."""
    return Settings(
        gemini_api_key="test-key",
        state_file=tmp_path / "view_state.json",
        media_dir=tmp_path / "media",
        video_poll_interval=0,
        video_poll_timeout=0,
    )


@pytest.fixture
def store(settings):
    return ViewStateStore(settings.state_file)


@pytest.fixture
def media(settings):
    return MediaStore(settings.media_dir)


@pytest.fixture
def jobs():
    """Video job manager double; tests set return values and side effects."""
    return AsyncMock(spec=AsyncVideoJobManager)


@pytest.fixture
def poller(jobs, store, media, settings):
    return VideoOperationPoller(
        jobs=jobs,
        store=store,
        media=media,
        poll_interval=0,
        poll_timeout=0,
        settings=settings,
    )
