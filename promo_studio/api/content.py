"""
Content API - generation and cached results per content kind
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from ..dependencies import get_content_service
from ..schemas import APIResponse, ContentKind, GenerationRequest, PromptRequest
from ..services import ContentGenerationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/content", tags=["content"])


def _content_kind(kind: ContentKind) -> ContentKind:
    if kind == ContentKind.VIDEO:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Video is a long-running job, use /api/video",
        )
    return kind


@router.get(
    "/interactive_concept/image",
    response_model=APIResponse[str],
    summary="Get the interactive concept art",
)
async def get_concept_image(
    service: ContentGenerationService = Depends(get_content_service),
):
    """Data URL of the art generated for the last interactive concept"""
    data = await service.get_concept_image()
    return APIResponse(success=True, data=data)


@router.post(
    "/{kind}",
    response_model=APIResponse[Any],
    summary="Generate content",
    description="Generate content of one kind and update its cached result",
)
async def generate_content(
    request: Optional[PromptRequest] = None,
    kind: ContentKind = Depends(_content_kind),
    service: ContentGenerationService = Depends(get_content_service),
):
    """
    Generate content

    - **kind**: content kind, any except video
    - **prompt**: topic or description (the body can be left out for analytics)
    """
    prompt = request.prompt if request else ""
    logger.info(f"Generate {kind.value}: {prompt[:50]}...")
    data = await service.generate(GenerationRequest(kind=kind, prompt=prompt))
    return APIResponse(success=True, data=data, message=f"{kind.value} generated")


@router.get(
    "/{kind}",
    response_model=APIResponse[Any],
    summary="Get cached content",
)
async def get_content(
    kind: ContentKind = Depends(_content_kind),
    service: ContentGenerationService = Depends(get_content_service),
):
    """Last generated result for a kind"""
    data = await service.get_cached(kind)
    return APIResponse(success=True, data=data)


@router.delete(
    "/{kind}",
    response_model=APIResponse[bool],
    summary="Clear cached content",
)
async def clear_content(
    kind: ContentKind = Depends(_content_kind),
    service: ContentGenerationService = Depends(get_content_service),
):
    removed = await service.clear(kind)
    return APIResponse(success=True, data=removed)
