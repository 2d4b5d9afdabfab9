"""HTTP transport used by the WebCrawlerAPI client."""
from __future__ import annotations

from typing import Protocol

import httpx

from webcrawlerapi.core.errors import NETWORK_ERROR, WebCrawlerAPIError
from webcrawlerapi.core.settings import DEFAULT_TIMEOUT

SDK_VERSION = "1.0.0"
USER_AGENT = f"WebCrawlerAPI-Python/{SDK_VERSION}"


class Transport(Protocol):
    """Contract for sending one request and returning the raw response."""

    def send(self, method: str, url: str, body: str | None = None) -> tuple[int, str]:
        """Return ``(status_code, response_text)`` for the request."""


class HttpxTransport:
    """:class:`Transport` backed by :class:`httpx.Client`."""

    def __init__(
        self,
        api_key: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
            "Cache-Control": "no-cache, no-store, must-revalidate",
            "Pragma": "no-cache",
            "Expires": "0",
        }
        self._client = http_client or httpx.Client(timeout=timeout)
        self._owns_client = http_client is None

    def send(self, method: str, url: str, body: str | None = None) -> tuple[int, str]:
        content = body.encode("utf-8") if body is not None else None
        try:
            response = self._client.request(method, url, content=content, headers=self._headers)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise WebCrawlerAPIError(NETWORK_ERROR, f"Network error: {exc}") from exc
        return response.status_code, response.text

    def close(self) -> None:
        if self._owns_client:
            self._client.close()


__all__ = ["HttpxTransport", "SDK_VERSION", "Transport", "USER_AGENT"]
