"""
Content Generation Service - generate content per kind and cache it per feature
"""

import logging
from typing import Any, Dict, List

from pydantic import BaseModel

from ..gemini_client import AsyncContentGenerator
from ..gemini_client.content import ContentResult
from ..schemas.content import ContentKind, GenerationRequest, InteractiveConcept
from ..utils.validation import require_prompt
from .view_state import StorageKey, ViewStateStore

logger = logging.getLogger(__name__)

# Kinds that do not take a user prompt
PROMPTLESS_KINDS = {ContentKind.ANALYTICS}

STORAGE_KEYS: Dict[ContentKind, str] = {
    ContentKind.SOCIAL_POSTS: StorageKey.SOCIAL_POSTS,
    ContentKind.BLOG_IDEAS: StorageKey.BLOG_IDEAS,
    ContentKind.IMAGE: StorageKey.IMAGE_URL,
    ContentKind.PRESS_RELEASE: StorageKey.PRESS_RELEASE,
    ContentKind.SUBMISSIONS: StorageKey.SUBMISSIONS,
    ContentKind.CONTENT_SCHEDULE: StorageKey.CONTENT_SCHEDULE,
    ContentKind.CONTACTS: StorageKey.CONTACTS,
    ContentKind.WORKFLOWS: StorageKey.WORKFLOWS,
    ContentKind.INTERACTIVE_CONCEPT: StorageKey.INTERACTIVE_CONCEPT,
    ContentKind.ANALYTICS: StorageKey.ANALYTICS,
}

# Kinds whose result is a single record; the rest are lists
SINGLE_RECORD_KINDS = {
    ContentKind.IMAGE,
    ContentKind.PRESS_RELEASE,
    ContentKind.INTERACTIVE_CONCEPT,
    ContentKind.ANALYTICS,
}


def empty_value(kind: ContentKind) -> Any:
    """What a feature shows before anything was generated"""
    if kind == ContentKind.IMAGE:
        return ""
    return None if kind in SINGLE_RECORD_KINDS else []


def to_storable(kind: ContentKind, result: ContentResult) -> Any:
    """JSON form of a result as it is cached in the store"""
    if kind == ContentKind.IMAGE:
        return result.data_url
    if isinstance(result, BaseModel):
        return result.model_dump(mode="json", by_alias=True)
    return [item.model_dump(mode="json", by_alias=True) for item in result]


class ContentGenerationService:
    """Content generation for every kind except video"""

    def __init__(self, generator: AsyncContentGenerator, store: ViewStateStore):
        """
        Args:
            generator: async content generator
            store: persisted view state store
        """
        self.generator = generator
        self.store = store

    async def generate(self, request: GenerationRequest) -> Any:
        """
        Generate content and update the cached value for its feature

        Contacts are merged into the cached list; every other kind replaces
        its cached value. An interactive concept also gets concept art for
        its image prompt, cached under its own key.

        Args:
            request: content kind (anything but video) and user prompt;
                analytics takes no prompt

        Returns:
            The cached JSON form of the new content

        Raises:
            PromptValidationError: blank prompt for a kind that needs one
            GenerationError: the service call failed; the cache is left as it was
        """
        kind = request.kind
        if kind == ContentKind.VIDEO:
            raise ValueError("Video generation goes through the video poller")

        prompt = request.prompt
        if kind not in PROMPTLESS_KINDS:
            prompt = require_prompt(prompt)

        result = await self.generator.request_content(kind, prompt)
        value = to_storable(kind, result)
        if kind == ContentKind.CONTACTS:
            value = await self._merge_contacts(value)
        await self.store.set(STORAGE_KEYS[kind], value)

        logger.info(f"Cached {kind.value} under {STORAGE_KEYS[kind]}")

        if kind == ContentKind.INTERACTIVE_CONCEPT:
            await self._generate_concept_image(result)
        return value

    async def _merge_contacts(self, contacts: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Append new contacts to the cached list, skipping ids already present"""
        existing = await self.store.get(StorageKey.CONTACTS) or []
        known_ids = {contact.get("id") for contact in existing}
        added = [contact for contact in contacts if contact.get("id") not in known_ids]
        logger.info(f"Adding {len(added)} of {len(contacts)} generated contacts")
        return existing + added

    async def _generate_concept_image(self, concept: InteractiveConcept) -> None:
        # The previous concept's art never stays paired with a new concept
        await self.store.delete(StorageKey.INTERACTIVE_CONCEPT_IMAGE)
        if not concept.image_prompt.strip():
            return
        image = await self.generator.generate_image(concept.image_prompt)
        await self.store.set(StorageKey.INTERACTIVE_CONCEPT_IMAGE, image.data_url)
        logger.info("Cached concept art for the interactive concept")

    async def get_cached(self, kind: ContentKind) -> Any:
        """Last generated content for a kind, or its empty value"""
        if kind == ContentKind.VIDEO:
            raise ValueError("Video state is owned by the video poller")
        return await self.store.get(STORAGE_KEYS[kind], empty_value(kind))

    async def get_concept_image(self) -> str:
        """Concept art of the last interactive concept, empty when there is none"""
        return await self.store.get(StorageKey.INTERACTIVE_CONCEPT_IMAGE, "")

    async def clear(self, kind: ContentKind) -> bool:
        """Forget the cached content of a kind"""
        if kind == ContentKind.VIDEO:
            raise ValueError("Video state is owned by the video poller")
        if kind == ContentKind.INTERACTIVE_CONCEPT:
            await self.store.delete(StorageKey.INTERACTIVE_CONCEPT_IMAGE)
        return await self.store.delete(STORAGE_KEYS[kind])
