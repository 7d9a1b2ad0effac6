"""
Input validation helpers
"""

from typing import Optional

from ..exceptions import PromptValidationError


def require_prompt(prompt: Optional[str]) -> str:
    """
    Reject an empty prompt before anything is sent to the service

    Returns:
        The prompt with surrounding whitespace removed

    Raises:
        PromptValidationError: prompt is missing or blank
    """
    cleaned = (prompt or "").strip()
    if not cleaned:
        raise PromptValidationError()
    return cleaned
