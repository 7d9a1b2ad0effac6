"""
Exception Handlers - application errors, error normalization and FastAPI handlers
"""

import asyncio
import logging
from enum import Enum
from typing import Optional

import httpx
from fastapi import FastAPI, Request, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

logger = logging.getLogger(__name__)


class ErrorResponse(BaseModel):
    """Error response body"""
    success: bool = False
    error: str
    detail: Optional[str] = None
    code: str


class AppException(Exception):
    """Base class for application errors"""
    def __init__(
        self,
        message: str,
        code: str = "APP_ERROR",
        detail: Optional[str] = None,
        status_code: int = 500,
    ):
        self.message = message
        self.code = code
        self.detail = detail
        self.status_code = status_code
        super().__init__(message)


class ErrorCategory(str, Enum):
    """User-facing failure categories for generative service calls"""

    AUTHENTICATION = "authentication"
    QUOTA = "quota"
    TIMEOUT = "timeout"
    PERMISSION = "permission"
    GENERIC = "generic"


CATEGORY_MESSAGES = {
    ErrorCategory.AUTHENTICATION: (
        "Authentication with the generative service failed. "
        "Check that the API key is configured and valid."
    ),
    ErrorCategory.QUOTA: (
        "The generative service quota has been exceeded. Please try again later."
    ),
    ErrorCategory.TIMEOUT: (
        "The generative service did not respond in time. Please try again."
    ),
    ErrorCategory.PERMISSION: (
        "The API key does not have permission to use this model."
    ),
}


def classify_error(status_code: Optional[int] = None, detail: str = "") -> ErrorCategory:
    """
    Classify a failed service call

    Args:
        status_code: HTTP status code, if the call got a response
        detail: error text reported by the service

    Returns:
        The matching error category
    """
    text = (detail or "").lower()

    if status_code == 401 or "unauthenticated" in text or "api key not valid" in text:
        return ErrorCategory.AUTHENTICATION
    if status_code == 403 or "permission_denied" in text or "permission denied" in text:
        return ErrorCategory.PERMISSION
    if status_code == 429 or "resource_exhausted" in text or "quota" in text:
        return ErrorCategory.QUOTA
    if status_code in (408, 504) or "deadline_exceeded" in text or "timed out" in text:
        return ErrorCategory.TIMEOUT
    return ErrorCategory.GENERIC


class GenerationError(AppException):
    """Generative service call failed; message is already normalized for users"""
    def __init__(
        self,
        category: ErrorCategory = ErrorCategory.GENERIC,
        detail: Optional[str] = None,
        status_code: int = 502,
    ):
        self.category = category
        message = CATEGORY_MESSAGES.get(category)
        if message is None:
            message = f"Generation failed: {detail}" if detail else "Generation failed."
        super().__init__(
            message=message,
            code="GENERATION_ERROR",
            detail=detail,
            status_code=status_code,
        )

    @property
    def user_message(self) -> str:
        return self.message

    @classmethod
    def from_service_error(
        cls,
        error: dict,
        status_code: Optional[int] = None,
    ) -> "GenerationError":
        """Build from a Google style error object: {"code", "message", "status"}"""
        message = str(error.get("message") or "")
        service_status = str(error.get("status") or "")
        code = status_code or error.get("code")
        if not isinstance(code, int):
            code = None
        category = classify_error(code, f"{service_status} {message}")
        return cls(category=category, detail=message or service_status or None)


class PromptValidationError(AppException):
    """Prompt rejected locally before any remote call"""
    def __init__(self, message: str = "Please enter a topic or description."):
        super().__init__(
            message=message,
            code="INVALID_PROMPT",
            status_code=400,
        )


class ConfigurationException(AppException):
    """Configuration error"""
    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="CONFIGURATION_ERROR",
            status_code=500,
        )


def normalize_error(exc: BaseException) -> str:
    """
    Turn any failure into the message shown to users

    Raw transport exceptions never reach the interface layer; they are
    mapped onto the same categories the client uses.
    """
    if isinstance(exc, GenerationError):
        return exc.user_message
    if isinstance(exc, (httpx.TimeoutException, asyncio.TimeoutError, TimeoutError)):
        return GenerationError(ErrorCategory.TIMEOUT, detail=str(exc)).user_message
    if isinstance(exc, httpx.HTTPStatusError):
        return GenerationError(
            classify_error(exc.response.status_code, exc.response.text),
            detail=str(exc),
        ).user_message
    if isinstance(exc, AppException):
        return exc.message
    return GenerationError(classify_error(None, str(exc)), detail=str(exc) or None).user_message


def setup_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers"""

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException):
        logger.error(f"AppException: {exc.code} - {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error=exc.message,
                detail=exc.detail,
                code=exc.code,
            ).model_dump(),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        logger.warning(f"HTTPException: {exc.status_code} - {exc.detail}")
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error=str(exc.detail),
                code=f"HTTP_{exc.status_code}",
            ).model_dump(),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Validation error: {exc.errors()}")
        return JSONResponse(
            status_code=422,
            content=ErrorResponse(
                error="Invalid request",
                detail="; ".join(
                    f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}"
                    for err in exc.errors()
                ),
                code="VALIDATION_ERROR",
            ).model_dump(),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled exception: {exc}")
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error="Internal server error",
                detail=str(exc) if app.debug else None,
                code="INTERNAL_ERROR",
            ).model_dump(),
        )
