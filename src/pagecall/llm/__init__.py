"""LLM client infrastructure for pagecall.

Provides OpenAI-compatible and Azure OpenAI HTTP clients, the pluggable
LLMClient protocol, and the LLM error hierarchy.
"""

from pagecall.llm.client import AzureOpenAIClient, OpenAIClient
from pagecall.llm.errors import (
    LLMAuthError,
    LLMClientError,
    LLMConfigError,
    LLMRateLimitError,
    LLMResponseError,
    LLMTransportError,
)
from pagecall.llm.protocols import LLMClient

__all__ = [
    "AzureOpenAIClient",
    "OpenAIClient",
    "LLMClient",
    "LLMClientError",
    "LLMConfigError",
    "LLMRateLimitError",
    "LLMAuthError",
    "LLMResponseError",
    "LLMTransportError",
]
