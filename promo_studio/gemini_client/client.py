"""
Async Gemini API Client - base HTTP client for the generative service
"""

import logging
from typing import Optional, Dict, Any

import httpx

from ..config import Settings, get_settings
from ..exceptions import (
    ConfigurationException,
    ErrorCategory,
    GenerationError,
    classify_error,
)

logger = logging.getLogger(__name__)


class AsyncGeminiClient:
    """Async Gemini API client"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client

        Args:
            api_key: Gemini API key, read from settings when omitted
            base_url: API base URL, read from settings when omitted
            settings: settings object
            transport: custom httpx transport (tests use httpx.MockTransport)
        """
        self._settings = settings or get_settings()
        self.api_key = api_key or self._settings.gemini_api_key
        self.base_url = base_url or self._settings.gemini_api_base_url

        if not self.api_key:
            raise ConfigurationException("GEMINI_API_KEY is required")

        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

        logger.info("AsyncGeminiClient initialized")

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "x-goog-api-key": self.api_key,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    @property
    def settings(self) -> Settings:
        return self._settings

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client"""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=self.headers,
                timeout=httpx.Timeout(self._settings.request_timeout),
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the connection pool"""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
            logger.debug("AsyncGeminiClient connection closed")

    async def _send(
        self,
        method: str,
        url: str,
        data: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        follow_redirects: bool = False,
    ) -> httpx.Response:
        """
        Send a request and map every failure onto GenerationError

        Args:
            method: HTTP method
            url: endpoint relative to the base URL, or an absolute URL
            data: JSON body
            params: query parameters
            follow_redirects: follow 3xx responses (result downloads)

        Returns:
            The successful response

        Raises:
            GenerationError: on transport errors or status >= 400
        """
        client = await self._get_client()

        logger.debug(f"Request: {method} {url}")

        try:
            response = await client.request(
                method=method,
                url=url,
                json=data,
                params=params,
                follow_redirects=follow_redirects,
            )
        except httpx.TimeoutException as e:
            logger.error(f"Gemini API timeout for {method} {url}: {e}")
            raise GenerationError(ErrorCategory.TIMEOUT, detail=str(e))
        except httpx.HTTPError as e:
            logger.error(f"Gemini API request failed for {method} {url}: {e}")
            raise GenerationError(ErrorCategory.GENERIC, detail=str(e) or type(e).__name__)

        logger.debug(f"Response: {response.status_code}")

        if response.status_code >= 400:
            error_payload = None
            try:
                error_payload = response.json().get("error")
            except Exception:
                error_payload = None

            if isinstance(error_payload, dict):
                error = GenerationError.from_service_error(
                    error_payload, status_code=response.status_code
                )
            else:
                detail = response.text[:200] or response.reason_phrase
                error = GenerationError(
                    classify_error(response.status_code, detail),
                    detail=detail,
                )

            logger.error(
                "Gemini API error %s for %s %s - category: %s, detail: %s",
                response.status_code,
                method,
                url,
                error.category.value,
                error.detail,
            )
            raise error

        return response

    async def _request(
        self,
        method: str,
        endpoint: str,
        data: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Send a request and decode the JSON body"""
        response = await self._send(method, endpoint, data=data, params=params)
        try:
            return response.json()
        except ValueError as e:
            raise GenerationError(
                ErrorCategory.GENERIC,
                detail=f"invalid JSON from {endpoint}: {e}",
            )

    async def get(
        self,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """GET request"""
        return await self._request("GET", endpoint, params=params)

    async def post(
        self,
        endpoint: str,
        data: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """POST request"""
        return await self._request("POST", endpoint, data=data)

    async def download(self, url: str) -> bytes:
        """
        Download binary content, following redirects

        Args:
            url: absolute URL or endpoint of the file

        Returns:
            Raw response bytes
        """
        response = await self._send("GET", url, follow_redirects=True)
        return response.content
