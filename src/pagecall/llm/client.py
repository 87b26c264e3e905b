"""Built-in httpx clients for OpenAI-compatible and Azure OpenAI chat APIs.

Provides sync HTTP clients for chat completion endpoints. Configuration
comes from constructor arguments or environment variables. Requests are
sent exactly once: there is no retry or backoff.
"""

from __future__ import annotations

import logging
import os
from typing import Any

import httpx

from pagecall.llm.errors import (
    LLMAuthError,
    LLMConfigError,
    LLMRateLimitError,
    LLMResponseError,
    LLMTransportError,
)

logger = logging.getLogger(__name__)

_AUTH_ERROR_STATUS_CODES = {401, 403}


class OpenAIClient:
    """Sync httpx client for OpenAI-compatible chat completions.

    Implements the LLMClient protocol. Authentication errors (401, 403),
    rate limiting (429), other HTTP failures and network errors are mapped
    to the ``LLMClientError`` hierarchy.

    Usage::

        with OpenAIClient(api_key="sk-...") as client:
            response = client.chat([{"role": "user", "content": "Hello"}])
            reply = response["choices"][0]["message"]
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        default_model: str = "gpt-4-0613",
        timeout: float = 120.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the OpenAI-compatible client.

        Args:
            api_key: API key. Falls back to the API_KEY env var.
            base_url: API base URL. Falls back to the API_BASE env var,
                then to https://api.openai.com/v1.
            default_model: Default model for chat requests.
            timeout: Per-request timeout in seconds.
            transport: Optional httpx transport (used by tests).

        Raises:
            LLMConfigError: If no API key is provided or found in environment.
        """
        self._api_key = api_key or os.environ.get("API_KEY", "")
        if not self._api_key:
            raise LLMConfigError(
                "No API key provided. Pass api_key= or set API_KEY "
                "environment variable."
            )
        self._base_url = (
            base_url or os.environ.get("API_BASE", "https://api.openai.com/v1")
        ).rstrip("/")
        self._default_model = default_model
        self._timeout = timeout
        self._client = httpx.Client(
            timeout=timeout,
            headers={"Content-Type": "application/json", **self._auth_headers()},
            transport=transport,
        )

    def _auth_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._api_key}"}

    def _endpoint(self) -> str:
        return f"{self._base_url}/chat/completions"

    def _endpoint_params(self) -> dict[str, str]:
        return {}

    def chat(
        self,
        messages: list[dict[str, Any]],
        *,
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        **kwargs: Any,
    ) -> dict:
        """Send a single chat completion request.

        Args:
            messages: List of OpenAI-format message dicts.
            model: Model to use. Falls back to default_model.
            temperature: Sampling temperature.
            max_tokens: Maximum tokens to generate.
            **kwargs: Additional payload parameters forwarded to the API
                (tools, functions, top_p, penalties, ...).

        Returns:
            Full response dict with 'choices', 'usage', 'model', etc.

        Raises:
            LLMAuthError: On 401/403.
            LLMRateLimitError: On 429.
            LLMResponseError: On unexpected response format.
            LLMTransportError: On network errors and other HTTP failures.
        """
        payload: dict[str, Any] = {
            "model": model or self._default_model,
            "messages": messages,
        }
        if temperature is not None:
            payload["temperature"] = temperature
        if max_tokens is not None:
            payload["max_tokens"] = max_tokens
        payload.update(kwargs)

        url = self._endpoint()
        logger.debug("POST %s (%d messages)", url, len(messages))
        try:
            response = self._client.post(
                url, params=self._endpoint_params(), json=payload
            )
        except httpx.HTTPError as exc:
            raise LLMTransportError(
                f"Chat completion request failed: {exc}"
            ) from exc

        # Check for auth errors before the generic status check
        if response.status_code in _AUTH_ERROR_STATUS_CODES:
            raise LLMAuthError(
                f"Authentication failed: HTTP {response.status_code} - "
                f"{response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        if response.status_code == 429:
            retry_after_raw = response.headers.get("Retry-After")
            retry_after: float | None = None
            if retry_after_raw is not None:
                try:
                    retry_after = float(retry_after_raw)
                except (ValueError, TypeError):
                    logger.debug("Ignoring non-numeric Retry-After %r", retry_after_raw)
            raise LLMRateLimitError(
                f"Rate limited: HTTP 429 - {response.text}",
                retry_after=retry_after,
                body=response.text,
            )

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise LLMTransportError(
                f"Chat completion failed: HTTP {response.status_code} - "
                f"{response.text}",
                status_code=response.status_code,
                body=response.text,
            ) from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise LLMResponseError(
                f"Response body is not JSON: {response.text[:200]}",
                status_code=response.status_code,
                body=response.text,
            ) from exc
        if not isinstance(data, dict) or "choices" not in data:
            raise LLMResponseError(
                f"Unexpected response format: missing 'choices' key. "
                f"Response: {data}"
            )
        return data

    def close(self) -> None:
        """Close the underlying httpx client."""
        self._client.close()

    def __enter__(self) -> OpenAIClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


class AzureOpenAIClient(OpenAIClient):
    """Sync httpx client for Azure OpenAI deployments.

    Requests go to ``{api_base}/openai/deployments/{deployment_id}/chat/completions``
    with an ``api-version`` query parameter and an ``api-key`` header.

    Usage::

        client = AzureOpenAIClient(
            api_key="...",
            api_base="https://my-resource.openai.azure.com",
            api_version="2023-07-01-preview",
            deployment_id="gpt-4",
        )
    """

    def __init__(
        self,
        api_key: str | None = None,
        api_base: str | None = None,
        api_version: str | None = None,
        deployment_id: str | None = None,
        default_model: str = "gpt-4-0613",
        timeout: float = 120.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the Azure client.

        Args:
            api_key: API key. Falls back to the API_KEY env var.
            api_base: Resource endpoint. Falls back to the API_BASE env var.
            api_version: API version. Falls back to the API_VERSION env var.
            deployment_id: Deployment name. Falls back to DEPLOYMENT_ID.
            default_model: Model name sent in the payload.
            timeout: Per-request timeout in seconds.
            transport: Optional httpx transport (used by tests).

        Raises:
            LLMConfigError: If any of the Azure settings are missing.
        """
        api_base = api_base or os.environ.get("API_BASE", "")
        self._api_version = api_version or os.environ.get("API_VERSION", "")
        self._deployment_id = deployment_id or os.environ.get("DEPLOYMENT_ID", "")
        missing = [
            name
            for name, value in (
                ("API_BASE", api_base),
                ("API_VERSION", self._api_version),
                ("DEPLOYMENT_ID", self._deployment_id),
            )
            if not value
        ]
        if missing:
            raise LLMConfigError(
                f"Azure OpenAI configuration incomplete: missing {', '.join(missing)}"
            )
        super().__init__(
            api_key=api_key,
            base_url=api_base,
            default_model=default_model,
            timeout=timeout,
            transport=transport,
        )

    def _auth_headers(self) -> dict[str, str]:
        return {"api-key": self._api_key}

    def _endpoint(self) -> str:
        return (
            f"{self._base_url}/openai/deployments/{self._deployment_id}"
            "/chat/completions"
        )

    def _endpoint_params(self) -> dict[str, str]:
        return {"api-version": self._api_version}
