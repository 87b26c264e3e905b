"""Pagecall exception hierarchy.

All pagecall-specific exceptions inherit from PagecallError. Every failure
aborts the whole multi-turn exchange and reaches the caller of
``Orchestrator.run()`` as one of these types.
"""


class PagecallError(Exception):
    """Base exception for all pagecall errors."""


class ChatCompletionError(PagecallError):
    """Raised when the chat-completion call itself fails.

    Covers network, authentication, and malformed request/response failures.
    Concrete client errors live in ``pagecall.llm.errors``.
    """


class MalformedToolArgumentsError(PagecallError):
    """Raised when a tool call's argument payload cannot be used.

    The payload either failed to parse as a JSON object or lacked a field
    the tool requires.
    """

    def __init__(self, tool_name: str, detail: str) -> None:
        self.tool_name = tool_name
        self.detail = detail
        super().__init__(f"Malformed arguments for tool '{tool_name}': {detail}")


class FetchFailedError(PagecallError):
    """Raised when fetching a page fails at the transport or HTTP level."""

    def __init__(self, url: str, detail: str) -> None:
        self.url = url
        self.detail = detail
        super().__init__(f"Failed to fetch {url}: {detail}")


class UnknownToolError(PagecallError):
    """Raised when the model requests a tool that is not registered."""

    def __init__(self, tool_name: str, available: list[str] | None = None) -> None:
        self.tool_name = tool_name
        self.available = list(available or [])
        message = f"Unknown tool: {tool_name}"
        if self.available:
            message += f" (available: {', '.join(self.available)})"
        super().__init__(message)


class TurnLimitExceededError(PagecallError):
    """Raised when the model keeps calling tools past the turn limit."""

    def __init__(self, max_turns: int) -> None:
        self.max_turns = max_turns
        super().__init__(
            f"Turn limit exceeded: no final answer after {max_turns} turns"
        )


class RunCancelledError(PagecallError):
    """Raised when an orchestrator run is stopped before it finishes."""


class ToolExecutionError(PagecallError):
    """Raised when a tool handler fails with an error outside this hierarchy."""

    def __init__(self, tool_name: str, detail: str) -> None:
        self.tool_name = tool_name
        self.detail = detail
        super().__init__(f"Tool '{tool_name}' failed: {detail}")
