"""Chat-client error hierarchy.

Every client failure is a ChatCompletionError, so callers of the
orchestrator can treat any failed chat call uniformly. Errors that come
from an HTTP response carry its status code and the start of its body.
"""

from __future__ import annotations

from pagecall.exceptions import ChatCompletionError

# Longest response-body excerpt kept on an error.
BODY_EXCERPT_CHARS = 500


class LLMClientError(ChatCompletionError):
    """Base for all chat-client errors.

    Attributes:
        status_code: HTTP status of the failed response, or None when the
            failure happened before a response arrived.
        body: Leading part of the response body, empty when unknown.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: str = "",
    ) -> None:
        self.status_code = status_code
        self.body = body[:BODY_EXCERPT_CHARS]
        super().__init__(message)


class LLMConfigError(LLMClientError):
    """Missing or inconsistent client configuration (API key, Azure fields)."""


class LLMAuthError(LLMClientError):
    """The endpoint rejected the credentials (401/403)."""


class LLMRateLimitError(LLMClientError):
    """The endpoint answered 429.

    ``retry_after`` holds the Retry-After header in seconds when present.
    It is informational only; requests are never retried.
    """

    def __init__(
        self,
        message: str = "Rate limited",
        retry_after: float | None = None,
        *,
        body: str = "",
    ) -> None:
        self.retry_after = retry_after
        if retry_after is not None:
            message = f"{message} (retry after {retry_after}s)"
        super().__init__(message, status_code=429, body=body)


class LLMResponseError(LLMClientError):
    """The reply arrived but has no usable chat-completion shape."""


class LLMTransportError(LLMClientError):
    """The request failed on the network or returned a non-success status."""
