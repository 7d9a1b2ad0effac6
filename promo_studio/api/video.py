"""
Video API - submit a video job and read its state
"""

import logging

from fastapi import APIRouter, Depends

from ..dependencies import get_video_poller
from ..schemas import APIResponse, PromptRequest, VideoGenerationStatus, VideoOperationState
from ..services import VideoOperationPoller

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/video", tags=["video"])


@router.post(
    "",
    response_model=APIResponse[VideoOperationState],
    summary="Submit a video generation job",
    description="Starts a new job, replacing any earlier one; polling runs in the background",
)
async def submit_video(
    request: PromptRequest,
    poller: VideoOperationPoller = Depends(get_video_poller),
):
    """
    Submit a video job

    A rejected submission is returned as a failed state, not an HTTP error.
    """
    state = await poller.submit(request.prompt)
    return APIResponse(
        success=state.status != VideoGenerationStatus.FAILED,
        data=state,
        message=state.error_detail or "Video generation started",
    )


@router.get(
    "",
    response_model=APIResponse[VideoOperationState],
    summary="Get the video job state",
)
async def get_video_state(
    poller: VideoOperationPoller = Depends(get_video_poller),
):
    """
    Current video job state

    A generating job whose polling stopped is reported with success false
    and the reason in message; POST /video/resume restarts polling.
    """
    state = await poller.get_state()
    if state.is_generating and poller.polling_error:
        return APIResponse(success=False, data=state, message=poller.polling_error)
    return APIResponse(success=True, data=state)


@router.post(
    "/resume",
    response_model=APIResponse[VideoOperationState],
    summary="Resume polling the stored video job",
)
async def resume_video(
    poller: VideoOperationPoller = Depends(get_video_poller),
):
    state = await poller.resume()
    return APIResponse(success=True, data=state)
