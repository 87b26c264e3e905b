"""Conversation data models.

Provides Role, ToolCallRequest, Message, and Conversation. All are
immutable: a Conversation only grows by producing a new value with one
more message appended.
"""

from __future__ import annotations

import enum
import json
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pagecall.exceptions import MalformedToolArgumentsError
from pagecall.llm.errors import LLMResponseError

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)


class Role(str, enum.Enum):
    """Author of a conversation message."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL_RESULT = "tool_result"


@dataclass(frozen=True)
class ToolCallRequest:
    """A tool invocation requested by the model.

    Attributes:
        name: Tool name; must match a registered ToolSpec name.
        arguments: Raw argument payload as sent by the model (JSON text).
        id: Provider-assigned call id, if any.
    """

    name: str
    arguments: str = "{}"
    id: str | None = None

    def parse_arguments(self) -> dict[str, Any]:
        """Parse the raw payload into a dict.

        Raises:
            MalformedToolArgumentsError: If the payload is not valid JSON
                or does not decode to a JSON object.
        """
        try:
            parsed = json.loads(self.arguments or "{}")
        except (json.JSONDecodeError, TypeError) as exc:
            raise MalformedToolArgumentsError(
                self.name, f"invalid JSON ({exc})"
            ) from exc
        if not isinstance(parsed, dict):
            raise MalformedToolArgumentsError(
                self.name,
                f"expected a JSON object, got {type(parsed).__name__}",
            )
        return parsed


@dataclass(frozen=True)
class Message:
    """One turn of conversation.

    A ``TOOL_RESULT`` message is assistant-authored: it carries a tool's
    output as content and goes over the wire with the assistant role.
    """

    role: Role
    content: str | None = None
    tool_call: ToolCallRequest | None = None

    @classmethod
    def system(cls, text: str) -> Message:
        return cls(role=Role.SYSTEM, content=text)

    @classmethod
    def user(cls, text: str) -> Message:
        return cls(role=Role.USER, content=text)

    @classmethod
    def assistant(cls, text: str) -> Message:
        return cls(role=Role.ASSISTANT, content=text)

    @classmethod
    def tool_result(cls, text: str) -> Message:
        return cls(role=Role.TOOL_RESULT, content=text)

    @property
    def text(self) -> str:
        """Content as a string, empty when absent."""
        return self.content or ""

    def to_openai(self) -> dict[str, Any]:
        """Serialize to an OpenAI chat-completion message dict."""
        role = Role.ASSISTANT if self.role == Role.TOOL_RESULT else self.role
        message: dict[str, Any] = {"role": role.value, "content": self.content}
        if self.tool_call is not None:
            message["tool_calls"] = [
                {
                    "id": self.tool_call.id or "call_0",
                    "type": "function",
                    "function": {
                        "name": self.tool_call.name,
                        "arguments": self.tool_call.arguments,
                    },
                }
            ]
        elif message["content"] is None:
            message["content"] = ""
        return message

    @classmethod
    def from_openai(cls, raw: dict[str, Any]) -> Message:
        """Parse a reply message from an OpenAI-format response.

        Accepts both the ``tool_calls`` list (the first call is used) and
        the legacy ``function_call`` object.
        """
        role_raw = raw.get("role") or Role.ASSISTANT.value
        try:
            role = Role(role_raw)
        except ValueError:
            logger.debug("Unrecognized role %r, treating as assistant", role_raw)
            role = Role.ASSISTANT

        tool_call: ToolCallRequest | None = None
        raw_calls = raw.get("tool_calls") or []
        if raw_calls:
            if not isinstance(raw_calls, list):
                raise LLMResponseError(f"'tool_calls' is not a list: {raw_calls!r}")
            if len(raw_calls) > 1:
                logger.warning(
                    "Reply requested %d tool calls; only the first is executed",
                    len(raw_calls),
                )
            first = raw_calls[0]
            if not isinstance(first, dict):
                raise LLMResponseError(f"Tool call entry is not an object: {first!r}")
            tool_call = _parse_function(first.get("function") or {}, call_id=first.get("id"))
        elif raw.get("function_call"):
            tool_call = _parse_function(raw["function_call"])

        return cls(role=role, content=raw.get("content"), tool_call=tool_call)


def _parse_function(func: object, call_id: str | None = None) -> ToolCallRequest:
    """Build a ToolCallRequest from a ``function`` / ``function_call`` object.

    Some providers send ``arguments`` already decoded as an object; it is
    re-encoded so the request always carries JSON text.
    """
    if not isinstance(func, dict):
        raise LLMResponseError(f"Function call is not an object: {func!r}")
    arguments = func.get("arguments")
    if isinstance(arguments, dict):
        arguments = json.dumps(arguments)
    elif arguments is not None and not isinstance(arguments, str):
        raise LLMResponseError(
            f"Function call arguments must be a string or object, got "
            f"{type(arguments).__name__}"
        )
    return ToolCallRequest(
        name=str(func.get("name") or ""),
        arguments=arguments or "{}",
        id=call_id,
    )


@dataclass(frozen=True)
class Conversation:
    """Ordered, append-only sequence of messages, oldest first."""

    messages: tuple[Message, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not isinstance(self.messages, tuple):
            object.__setattr__(self, "messages", tuple(self.messages))

    @classmethod
    def of(cls, *messages: Message) -> Conversation:
        return cls(messages=messages)

    @classmethod
    def from_question(
        cls, question: str, system_prompt: str | None = None
    ) -> Conversation:
        """Start a conversation from a single user question."""
        messages: list[Message] = []
        if system_prompt:
            messages.append(Message.system(system_prompt))
        messages.append(Message.user(question))
        return cls(messages=tuple(messages))

    def append(self, message: Message) -> Conversation:
        """Return a new conversation with ``message`` as the most recent turn."""
        return Conversation(messages=self.messages + (message,))

    @property
    def last(self) -> Message | None:
        return self.messages[-1] if self.messages else None

    def to_openai(self) -> list[dict[str, Any]]:
        return [m.to_openai() for m in self.messages]

    def __len__(self) -> int:
        return len(self.messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(self.messages)

    def __getitem__(self, index: int) -> Message:
        return self.messages[index]
