"""LLM client protocol.

Defines the pluggable interface the orchestrator talks to.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class LLMClient(Protocol):
    """Protocol for pluggable chat-completion clients.

    Any object with chat() and close() methods matching this signature works.
    The built-in OpenAIClient and AzureOpenAIClient implement this protocol.
    Responses are OpenAI-style dicts (``choices[i].message``).
    """

    def chat(
        self,
        messages: list[dict[str, Any]],
        *,
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        **kwargs: Any,
    ) -> dict:
        """Send messages, return response dict."""
        ...

    def close(self) -> None:
        """Release underlying resources."""
        ...
