"""
View State Store - persisted key-value state per feature

Values are stored in a single JSON file and written on every set, so the
state survives a restart. Listeners subscribed to a key are notified after
each write.
"""

import asyncio
import copy
import inspect
import json
import logging
from collections import defaultdict
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

import aiofiles

from ..config import get_settings

logger = logging.getLogger(__name__)

Listener = Callable[[str, Any], Union[None, Awaitable[None]]]


class StorageKey:
    """Feature-scoped storage keys"""
    SOCIAL_POSTS = "aiFactory_socialPosts"
    BLOG_IDEAS = "aiFactory_blogIdeas"
    IMAGE_URL = "aiFactory_imageUrl"
    VIDEO_OPERATION = "aiFactory_videoOperation"
    PRESS_RELEASE = "dist_pressRelease"
    SUBMISSIONS = "dist_submissions"
    CONTENT_SCHEDULE = "dist_schedule"
    CONTACTS = "crm_contacts"
    WORKFLOWS = "automation_workflows"
    INTERACTIVE_CONCEPT = "interactive_concept"
    INTERACTIVE_CONCEPT_IMAGE = "interactive_conceptImage"
    ANALYTICS = "analytics_snapshot"


class ViewStateStore:
    """Durable key-value store with change notification"""

    def __init__(self, storage_path: Optional[Union[str, Path]] = None):
        """
        Initialize the store

        Args:
            storage_path: JSON file path, read from settings when omitted
        """
        if storage_path:
            self._storage_path = Path(storage_path)
        else:
            self._storage_path = Path(get_settings().state_file)

        self._lock = asyncio.Lock()
        self._data: Optional[Dict[str, Any]] = None
        self._listeners: Dict[str, List[Listener]] = defaultdict(list)
        self._ensure_storage_dir()

        logger.info(f"ViewStateStore initialized, storage: {self._storage_path}")

    @property
    def storage_path(self) -> Path:
        return self._storage_path

    def _ensure_storage_dir(self) -> None:
        self._storage_path.parent.mkdir(parents=True, exist_ok=True)
        if not self._storage_path.exists():
            self._storage_path.write_text("{}", encoding="utf-8")

    async def _load(self) -> Dict[str, Any]:
        """Load the file once; unreadable content starts empty"""
        if self._data is None:
            try:
                async with aiofiles.open(self._storage_path, "r", encoding="utf-8") as f:
                    content = await f.read()
                data = json.loads(content) if content.strip() else {}
                if not isinstance(data, dict):
                    raise ValueError("state file does not hold an object")
            except FileNotFoundError:
                data = {}
            except ValueError as e:
                logger.warning(f"Ignoring unreadable state file {self._storage_path}: {e}")
                data = {}
            self._data = data
        return self._data

    async def _save(self, data: Dict[str, Any]) -> None:
        """Write to a temporary file and swap it in"""
        tmp_path = self._storage_path.with_suffix(self._storage_path.suffix + ".tmp")
        async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
            await f.write(json.dumps(data, ensure_ascii=False, indent=2))
        tmp_path.replace(self._storage_path)

    async def get(self, key: str, default: Any = None) -> Any:
        """
        Read a value

        Args:
            key: feature key
            default: returned when the key is absent

        Returns:
            A copy of the stored value, or default
        """
        async with self._lock:
            data = await self._load()
            if key not in data:
                return default
            return copy.deepcopy(data[key])

    async def set(self, key: str, value: Any) -> None:
        """
        Store a value and persist it before returning

        Args:
            key: feature key
            value: JSON-serializable value
        """
        # Fail before touching the cache if the value cannot be stored
        json.dumps(value)
        stored = copy.deepcopy(value)

        async with self._lock:
            data = await self._load()
            updated = {**data, key: stored}
            await self._save(updated)
            self._data = updated

        logger.debug(f"Stored view state: {key}")
        await self._notify(key, copy.deepcopy(stored))

    async def delete(self, key: str) -> bool:
        """
        Remove a key

        Returns:
            Whether the key existed
        """
        async with self._lock:
            data = await self._load()
            if key not in data:
                return False
            updated = {k: v for k, v in data.items() if k != key}
            await self._save(updated)
            self._data = updated

        logger.debug(f"Deleted view state: {key}")
        await self._notify(key, None)
        return True

    def peek(self, key: str, default: Any = None) -> Any:
        """Last persisted value, read without waiting for the lock"""
        if self._data is None or key not in self._data:
            return default
        return copy.deepcopy(self._data[key])

    async def keys(self) -> List[str]:
        async with self._lock:
            data = await self._load()
            return list(data.keys())

    def subscribe(self, key: str, listener: Listener) -> Callable[[], None]:
        """
        Register a change listener for a key

        Args:
            key: feature key
            listener: called with (key, value) after each write; may be async

        Returns:
            A function that removes the listener
        """
        self._listeners[key].append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners.get(key, []):
                self._listeners[key].remove(listener)

        return unsubscribe

    async def _notify(self, key: str, value: Any) -> None:
        for listener in list(self._listeners.get(key, [])):
            try:
                result = listener(key, value)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.error(f"View state listener for {key} failed: {e}", exc_info=True)
