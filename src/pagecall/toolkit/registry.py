"""ToolRegistry: maps tool names to handlers and executes tool calls.

Every handler follows the same contract: validated keyword arguments in,
text out, typed exception on failure. The orchestrator only ever talks to
the registry, so new tools never require changes to the loop.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import ValidationError

from pagecall.exceptions import (
    MalformedToolArgumentsError,
    PagecallError,
    ToolExecutionError,
    UnknownToolError,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from pagecall.models.messages import ToolCallRequest
    from pagecall.toolkit.models import ToolSpec

logger = logging.getLogger(__name__)


def _describe_validation_error(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "<root>"
        parts.append(f"{loc}: {err.get('msg', 'invalid')}")
    return "; ".join(parts)


class ToolRegistry:
    """Dispatches tool calls to registered tool handlers.

    Usage::

        registry = ToolRegistry(default_tools())
        output = registry.execute(ToolCallRequest("fetch_page_text", '{"url": "..."}'))
    """

    def __init__(self, tools: Iterable[ToolSpec] = ()) -> None:
        self._tools: dict[str, ToolSpec] = {}
        for tool in tools:
            self.register(tool)

    def register(self, tool: ToolSpec) -> None:
        """Add a tool.

        Raises:
            ValueError: If a tool with the same name is already registered.
        """
        if tool.name in self._tools:
            raise ValueError(f"Duplicate tool name: {tool.name}")
        self._tools[tool.name] = tool

    def resolve(self, name: str) -> ToolSpec:
        """Look up a tool by name.

        Raises:
            UnknownToolError: If no tool has that name.
        """
        tool = self._tools.get(name)
        if tool is None:
            raise UnknownToolError(name, available=self.names())
        return tool

    def names(self) -> list[str]:
        return list(self._tools.keys())

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def prepare_arguments(self, tool: ToolSpec, call: ToolCallRequest) -> dict:
        """Parse and validate a call's arguments for ``tool``.

        Raises:
            MalformedToolArgumentsError: If the payload does not parse or
                does not satisfy the tool's argument model.
        """
        arguments = call.parse_arguments()
        if tool.args_model is None:
            return arguments
        try:
            validated = tool.args_model.model_validate(arguments)
        except ValidationError as exc:
            raise MalformedToolArgumentsError(
                tool.name, _describe_validation_error(exc)
            ) from exc
        return validated.model_dump()

    def execute(self, call: ToolCallRequest) -> str:
        """Execute a tool call and return its text output.

        Raises:
            UnknownToolError: If the tool is not registered.
            MalformedToolArgumentsError: If the arguments are unusable. The
                handler is not invoked in that case.
            PagecallError: Whatever typed failure the handler raises.
            ToolExecutionError: If the handler raises any other exception.
        """
        tool = self.resolve(call.name)
        arguments = self.prepare_arguments(tool, call)
        logger.debug("Executing tool %s with %s", tool.name, arguments)
        try:
            output = tool.handler(**arguments)
        except PagecallError:
            raise
        except Exception as exc:
            raise ToolExecutionError(
                tool.name, f"{type(exc).__name__}: {exc}"
            ) from exc
        return str(output)
