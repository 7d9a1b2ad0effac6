"""
Pydantic Schemas - data model definitions
"""

from .common import APIResponse, PromptRequest
from .content import (
    ContentKind,
    GenerationRequest,
    SocialMediaPost,
    BlogIdea,
    PressRelease,
    GeneratedImage,
    Contact,
    AutomationWorkflow,
    InteractiveConcept,
    AnalyticsData,
    KPI,
    Sentiment,
    EngagementTrend,
    TopContent,
    ScheduledPost,
    Submission,
)
from .video import (
    OperationHandle,
    VideoGenerationStatus,
    VideoOperationState,
    VideoJobStatus,
)

__all__ = [
    # Common
    "APIResponse",
    "PromptRequest",
    # Content
    "ContentKind",
    "GenerationRequest",
    "SocialMediaPost",
    "BlogIdea",
    "PressRelease",
    "GeneratedImage",
    "Contact",
    "AutomationWorkflow",
    "InteractiveConcept",
    "AnalyticsData",
    "KPI",
    "Sentiment",
    "EngagementTrend",
    "TopContent",
    "ScheduledPost",
    "Submission",
    # Video
    "OperationHandle",
    "VideoGenerationStatus",
    "VideoOperationState",
    "VideoJobStatus",
]
