"""
Async Video Job Manager - long-running video generation operations
"""

import logging
from typing import Any, Dict, Optional

from .client import AsyncGeminiClient
from ..exceptions import ErrorCategory, GenerationError
from ..schemas.video import OperationHandle, VideoJobStatus

logger = logging.getLogger(__name__)


class AsyncVideoJobManager:
    """Submit, poll and fetch Veo video generation operations"""

    def __init__(self, client: AsyncGeminiClient, number_of_videos: int = 1):
        """
        Args:
            client: async Gemini API client
            number_of_videos: samples requested per job
        """
        self.client = client
        self.number_of_videos = number_of_videos
        self._settings = client.settings

    async def submit_video_job(self, prompt: str) -> OperationHandle:
        """
        Start a video generation operation

        Args:
            prompt: text description of the video

        Returns:
            The operation object, used as the handle for polling

        Raises:
            GenerationError: the request was rejected or returned no operation
        """
        logger.info(f"Submitting video job for prompt: {prompt[:50]}...")

        operation = await self.client.post(
            f"/v1beta/models/{self._settings.video_model}:predictLongRunning",
            data={
                "instances": [{"prompt": prompt}],
                "parameters": {"sampleCount": self.number_of_videos},
            },
        )

        if not operation.get("name"):
            raise GenerationError(
                ErrorCategory.GENERIC,
                detail="the service did not return an operation",
            )

        logger.info(f"Video job submitted: {operation['name']}")
        return operation

    async def poll_video_job(self, handle: OperationHandle) -> VideoJobStatus:
        """
        Check the status of an operation

        Args:
            handle: operation object from submit_video_job or a previous poll

        Returns:
            VideoJobStatus with the refreshed operation as its handle

        Raises:
            GenerationError: the status check failed or the operation reports an error
        """
        name = handle.get("name") if isinstance(handle, dict) else None
        if not name:
            raise GenerationError(ErrorCategory.GENERIC, detail="operation handle has no name")

        operation = await self.client.get(f"/v1beta/{name}")

        error = operation.get("error")
        if error:
            logger.warning(f"Video operation {name} reported an error: {error}")
            if not isinstance(error, dict):
                error = {"message": str(error)}
            raise GenerationError.from_service_error(error)

        done = bool(operation.get("done"))
        if "name" not in operation:
            operation = {**operation, "name": name}

        return VideoJobStatus(
            done=done,
            handle=operation,
            result_reference=self._extract_video_uri(operation) if done else None,
        )

    async def fetch_result(self, reference: str) -> bytes:
        """
        Download a finished video

        Args:
            reference: URI from the completed operation

        Returns:
            The video bytes
        """
        logger.info("Fetching generated video")
        payload = await self.client.download(reference)
        if not payload:
            raise GenerationError(ErrorCategory.GENERIC, detail="the video download was empty")
        logger.info(f"Fetched generated video ({len(payload)} bytes)")
        return payload

    @staticmethod
    def _extract_video_uri(operation: Dict[str, Any]) -> Optional[str]:
        """First generated sample's URI, or None when the job produced nothing"""
        response = operation.get("response") or {}
        video_response = response.get("generateVideoResponse") or response
        samples = (
            video_response.get("generatedSamples")
            or video_response.get("generatedVideos")
            or []
        )
        for sample in samples:
            video = (sample or {}).get("video") or {}
            uri = video.get("uri")
            if uri:
                return uri
        return None
