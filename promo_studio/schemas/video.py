"""
Video Schemas - long-running video operation state
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, model_validator


# Opaque token from the generative service; only the client reads inside it
OperationHandle = Dict[str, Any]


class VideoGenerationStatus(str, Enum):
    """Video operation status"""

    IDLE = "idle"
    GENERATING = "generating"
    SUCCESS = "success"
    FAILED = "failed"


class VideoOperationState(BaseModel):
    """
    Persisted state of the single video generation slot

    Exactly one of operation_handle, result_locator and error_detail is set,
    matching the status; an idle state carries none of them.
    """

    status: VideoGenerationStatus = VideoGenerationStatus.IDLE
    operation_handle: Optional[OperationHandle] = Field(
        default=None, description="In-flight operation, only while generating"
    )
    result_locator: Optional[str] = Field(
        default=None, description="Local URL of the fetched video, only on success"
    )
    error_detail: Optional[str] = Field(
        default=None, description="User-facing failure reason, only on failure"
    )
    prompt: Optional[str] = None
    submitted_at: Optional[datetime] = None

    @model_validator(mode="after")
    def _check_consistency(self) -> "VideoOperationState":
        expected = {
            VideoGenerationStatus.IDLE: None,
            VideoGenerationStatus.GENERATING: "operation_handle",
            VideoGenerationStatus.SUCCESS: "result_locator",
            VideoGenerationStatus.FAILED: "error_detail",
        }[self.status]
        for name in ("operation_handle", "result_locator", "error_detail"):
            present = getattr(self, name) is not None
            if present != (name == expected):
                raise ValueError(f"{name} is inconsistent with status {self.status.value}")
        return self

    @classmethod
    def idle(cls) -> "VideoOperationState":
        return cls()

    @classmethod
    def generating(
        cls,
        handle: OperationHandle,
        prompt: Optional[str] = None,
        submitted_at: Optional[datetime] = None,
    ) -> "VideoOperationState":
        return cls(
            status=VideoGenerationStatus.GENERATING,
            operation_handle=handle,
            prompt=prompt,
            submitted_at=submitted_at or datetime.utcnow(),
        )

    @classmethod
    def success(cls, locator: str, prompt: Optional[str] = None) -> "VideoOperationState":
        return cls(status=VideoGenerationStatus.SUCCESS, result_locator=locator, prompt=prompt)

    @classmethod
    def failed(cls, detail: str, prompt: Optional[str] = None) -> "VideoOperationState":
        return cls(status=VideoGenerationStatus.FAILED, error_detail=detail, prompt=prompt)

    @property
    def is_generating(self) -> bool:
        return self.status == VideoGenerationStatus.GENERATING

    @property
    def is_terminal(self) -> bool:
        return self.status in (VideoGenerationStatus.SUCCESS, VideoGenerationStatus.FAILED)


class VideoJobStatus(BaseModel):
    """Result of a single status check"""

    done: bool
    handle: OperationHandle
    result_reference: Optional[str] = None
