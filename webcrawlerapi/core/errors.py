from __future__ import annotations

INVALID_RESPONSE = "invalid_response"
INTERRUPTED = "interrupted"
NETWORK_ERROR = "network_error"
UNKNOWN_ERROR = "unknown_error"


class WebCrawlerAPIError(RuntimeError):
    """Raised when a WebCrawlerAPI call cannot produce a result.

    ``error_code`` is one of the module constants for client-side failures or
    the ``error_code`` reported by the service for non-2xx responses.
    """

    def __init__(self, error_code: str, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.error_code = error_code
        self.message = message
        self.status_code = status_code

    def __repr__(self) -> str:
        return f"WebCrawlerAPIError(error_code={self.error_code!r}, message={self.message!r})"


__all__ = [
    "INTERRUPTED",
    "INVALID_RESPONSE",
    "NETWORK_ERROR",
    "UNKNOWN_ERROR",
    "WebCrawlerAPIError",
]
