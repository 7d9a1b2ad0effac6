"""
Async Gemini API Client Module
"""

from .client import AsyncGeminiClient
from .content import AsyncContentGenerator
from .videos import AsyncVideoJobManager

__all__ = [
    "AsyncGeminiClient",
    "AsyncContentGenerator",
    "AsyncVideoJobManager",
]
