"""
Media Store - local files for fetched binary results
"""

import logging
from pathlib import Path
from typing import Optional, Union
from uuid import uuid4

import aiofiles

from ..config import get_settings

logger = logging.getLogger(__name__)


class MediaStore:
    """Writes fetched payloads under the media directory and hands out local URLs"""

    def __init__(
        self,
        media_dir: Optional[Union[str, Path]] = None,
        url_prefix: str = "/media",
    ):
        """
        Args:
            media_dir: root directory, read from settings when omitted
            url_prefix: URL path the directory is served under
        """
        self._media_dir = Path(media_dir) if media_dir else Path(get_settings().media_dir)
        self._url_prefix = url_prefix.rstrip("/")
        self._media_dir.mkdir(parents=True, exist_ok=True)

    @property
    def media_dir(self) -> Path:
        return self._media_dir

    async def save(self, payload: bytes, category: str, suffix: str) -> str:
        """
        Write a payload to a new file

        Args:
            payload: file content
            category: subdirectory, e.g. "videos"
            suffix: file extension including the dot

        Returns:
            Locator of the file, e.g. /media/videos/<id>.mp4
        """
        directory = self._media_dir / category
        directory.mkdir(parents=True, exist_ok=True)
        filename = f"{uuid4().hex}{suffix}"

        path = directory / filename
        try:
            async with aiofiles.open(path, "wb") as f:
                await f.write(payload)
        except BaseException:
            path.unlink(missing_ok=True)
            raise

        locator = f"{self._url_prefix}/{category}/{filename}"
        logger.info(f"Saved media file: {locator} ({len(payload)} bytes)")
        return locator

    async def save_video(self, payload: bytes) -> str:
        return await self.save(payload, "videos", ".mp4")

    def resolve(self, locator: str) -> Optional[Path]:
        """Map a locator back to its file, None when it is not one of ours"""
        prefix = f"{self._url_prefix}/"
        if not locator.startswith(prefix):
            return None
        path = (self._media_dir / locator[len(prefix):]).resolve()
        if self._media_dir.resolve() not in path.parents:
            return None
        return path

    def discard(self, locator: str) -> bool:
        """Remove a file written earlier"""
        path = self.resolve(locator)
        if path is None or not path.exists():
            return False
        path.unlink()
        logger.debug(f"Discarded media file: {locator}")
        return True
