"""HTTP client for the chat and file extraction endpoints."""

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8000/api"


class GatewayError(Exception):
    """Raised when an endpoint answers with success=false or is unreachable."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class GatewayClient:
    """Async client for the backend API.

    Args:
        base_url: API root, including the ``/api`` prefix.
        client: Optional preconfigured httpx client (tests pass one with a
            mock transport).
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        client: httpx.AsyncClient | None = None,
        timeout: float = 120.0,
    ) -> None:
        self._client = client or httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(timeout=timeout, connect=10.0),
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "GatewayClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def parse_file(
        self,
        filename: str,
        content: bytes,
        content_type: str = "application/octet-stream",
    ) -> dict[str, Any]:
        """Upload a file and return its extraction payload."""
        return await self._post(
            "/parse-file",
            fallback="Failed to parse file",
            files={"file": (filename, content, content_type)},
        )

    async def chat(
        self,
        messages: list[dict[str, str]],
        file_content: str | None = None,
    ) -> dict[str, Any]:
        """Send the conversation and return the reply payload."""
        return await self._post(
            "/chat",
            fallback="Failed to get response",
            json={"messages": messages, "file_content": file_content},
        )

    async def _post(self, path: str, fallback: str, **kwargs) -> dict[str, Any]:
        try:
            response = await self._client.post(path, **kwargs)
        except httpx.HTTPError as e:
            logger.error("Request to %s failed: %s", path, e)
            raise GatewayError(str(e) or fallback) from e

        try:
            body = response.json()
        except ValueError as e:
            raise GatewayError(fallback, response.status_code) from e

        if not body.get("success"):
            raise GatewayError(body.get("message") or fallback, response.status_code)

        return body.get("data") or {}
