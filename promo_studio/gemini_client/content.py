"""
Async Content Generator - single request/response generation for every kind except video
"""

import json
import logging
from typing import Any, Dict, List, Union

from pydantic import BaseModel, TypeAdapter, ValidationError

from .client import AsyncGeminiClient
from .prompts import IMAGE_PROMPT_TEMPLATE, TEMPLATES, ContentTemplate
from ..exceptions import ErrorCategory, GenerationError
from ..schemas.content import ContentKind, GeneratedImage

logger = logging.getLogger(__name__)

ContentResult = Union[BaseModel, List[BaseModel]]


class AsyncContentGenerator:
    """Structured content generation on top of the Gemini client"""

    def __init__(self, client: AsyncGeminiClient):
        """
        Args:
            client: async Gemini API client
        """
        self.client = client
        self._settings = client.settings

    async def request_content(self, kind: ContentKind, prompt: str) -> ContentResult:
        """
        Generate one content kind

        Args:
            kind: content kind, anything but video
            prompt: user prompt (ignored by kinds that take none)

        Returns:
            A record or a list of records for the kind

        Raises:
            ValueError: kind is video, which is a long-running job
            GenerationError: the service call failed or returned unusable data
        """
        if kind == ContentKind.VIDEO:
            raise ValueError("Video is generated through the video job manager")
        if kind == ContentKind.IMAGE:
            return await self.generate_image(prompt)

        template = TEMPLATES[kind]
        logger.info(f"Generating {kind.value} for prompt: {prompt[:50]}...")

        text = await self._generate_json(template.render(prompt), template.schema)
        records = self._parse(kind, template, text)

        count = len(records) if isinstance(records, list) else 1
        logger.info(f"Generated {count} {kind.value} record(s)")
        return records

    async def generate_image(self, prompt: str) -> GeneratedImage:
        """
        Generate a single 1:1 PNG image

        Returns:
            The image as a base64 data URL
        """
        logger.info(f"Generating image for prompt: {prompt[:50]}...")

        result = await self.client.post(
            f"/v1beta/models/{self._settings.image_model}:predict",
            data={
                "instances": [{"prompt": IMAGE_PROMPT_TEMPLATE.format(prompt=prompt)}],
                "parameters": {
                    "sampleCount": 1,
                    "outputMimeType": "image/png",
                    "aspectRatio": "1:1",
                },
            },
        )

        predictions = result.get("predictions") or []
        image_bytes = predictions[0].get("bytesBase64Encoded") if predictions else None
        if not image_bytes:
            raise GenerationError(ErrorCategory.GENERIC, detail="No image was generated.")

        mime_type = predictions[0].get("mimeType") or "image/png"
        return GeneratedImage(data_url=f"data:{mime_type};base64,{image_bytes}")

    async def _generate_json(self, contents: str, schema: Dict[str, Any]) -> str:
        """Call generateContent in JSON mode and return the response text"""
        result = await self.client.post(
            f"/v1beta/models/{self._settings.text_model}:generateContent",
            data={
                "contents": [{"role": "user", "parts": [{"text": contents}]}],
                "generationConfig": {
                    "responseMimeType": "application/json",
                    "responseSchema": schema,
                },
            },
        )

        block_reason = (result.get("promptFeedback") or {}).get("blockReason")
        if block_reason:
            raise GenerationError(
                ErrorCategory.GENERIC, detail=f"prompt was blocked ({block_reason})"
            )

        candidates = result.get("candidates") or []
        parts = (candidates[0].get("content") or {}).get("parts", []) if candidates else []
        text = "".join(part.get("text", "") for part in parts)
        if not text.strip():
            raise GenerationError(ErrorCategory.GENERIC, detail="the service returned no content")
        return text

    @staticmethod
    def _parse(kind: ContentKind, template: ContentTemplate, text: str) -> ContentResult:
        annotation = List[template.record] if template.many else template.record
        try:
            return TypeAdapter(annotation).validate_python(json.loads(text))
        except (ValueError, ValidationError) as e:
            logger.error(f"Unreadable {kind.value} response: {e}")
            raise GenerationError(
                ErrorCategory.GENERIC,
                detail=f"the {kind.value.replace('_', ' ')} response could not be read",
            )
