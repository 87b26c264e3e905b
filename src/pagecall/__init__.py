"""Pagecall: a minimal function-calling loop that lets a model read web pages.

The orchestrator sends a conversation to a chat-completion endpoint, runs
the tool the model asks for (fetching a page's text), appends the result,
and repeats until the model answers in plain text.
"""

from pagecall.exceptions import (
    ChatCompletionError,
    FetchFailedError,
    MalformedToolArgumentsError,
    PagecallError,
    RunCancelledError,
    ToolExecutionError,
    TurnLimitExceededError,
    UnknownToolError,
)
from pagecall.llm import AzureOpenAIClient, LLMClient, OpenAIClient
from pagecall.models import (
    Conversation,
    Message,
    Role,
    SamplingConfig,
    ToolCallRequest,
)
from pagecall.orchestrator import (
    Orchestrator,
    OrchestratorConfig,
    OrchestratorState,
    TurnRecord,
)
from pagecall.settings import Settings, create_client, load_settings
from pagecall.toolkit import (
    PageFetcher,
    ToolRegistry,
    ToolSpec,
    default_tools,
    fetch_page_text,
)

__version__ = "0.1.0"

__all__ = [
    # Core
    "Orchestrator",
    "OrchestratorConfig",
    "OrchestratorState",
    "TurnRecord",
    # Models
    "Conversation",
    "Message",
    "Role",
    "SamplingConfig",
    "ToolCallRequest",
    # Tools
    "PageFetcher",
    "ToolRegistry",
    "ToolSpec",
    "default_tools",
    "fetch_page_text",
    # LLM
    "AzureOpenAIClient",
    "LLMClient",
    "OpenAIClient",
    # Settings
    "Settings",
    "create_client",
    "load_settings",
    # Errors
    "PagecallError",
    "ChatCompletionError",
    "MalformedToolArgumentsError",
    "FetchFailedError",
    "UnknownToolError",
    "TurnLimitExceededError",
    "RunCancelledError",
    "ToolExecutionError",
]
