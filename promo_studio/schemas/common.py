"""
Common Schemas - shared response envelope
"""

from typing import TypeVar, Generic, Optional
from datetime import datetime
from pydantic import BaseModel, Field


T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    """Generic API response wrapper"""

    success: bool = Field(default=True, description="Whether the request succeeded")
    data: Optional[T] = Field(default=None, description="Response payload")
    message: Optional[str] = Field(default=None, description="Response message")
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Response time")


class PromptRequest(BaseModel):
    """Prompt submitted for a generation"""

    prompt: str = Field(
        default="",
        max_length=10000,
        description="Topic or description to generate from",
        examples=["New synthwave single 'Neon Rain' out Friday"],
    )
