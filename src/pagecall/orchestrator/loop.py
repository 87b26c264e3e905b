"""Core function-calling loop.

Provides the Orchestrator class that runs a tool-calling loop: send the
conversation and tools to the LLM, execute the requested tool, append its
result, and repeat until the LLM answers with plain text.

The loop is iterative and carries exactly two pieces of state: the
conversation value and the turn count.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any

from pagecall.exceptions import (
    ChatCompletionError,
    PagecallError,
    RunCancelledError,
    TurnLimitExceededError,
)
from pagecall.llm.errors import LLMConfigError, LLMResponseError
from pagecall.models.messages import Message
from pagecall.orchestrator.config import OrchestratorConfig, OrchestratorState
from pagecall.orchestrator.models import TurnRecord
from pagecall.toolkit.registry import ToolRegistry

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from pagecall.llm.protocols import LLMClient
    from pagecall.models.messages import Conversation, ToolCallRequest
    from pagecall.toolkit.models import ToolSpec

logger = logging.getLogger(__name__)


class Orchestrator:
    """Runs the function-calling loop until the model returns text.

    Each turn issues exactly one chat call and at most one tool
    invocation. Any failure aborts the whole exchange and is raised to the
    caller of ``run()`` as a PagecallError subclass; no partial answer is
    ever returned.

    Usage::

        from pagecall import Conversation, Orchestrator, PageFetcher

        with PageFetcher() as fetcher:
            orch = Orchestrator(client=my_client)
            answer = orch.run(
                [fetcher.as_tool()],
                Conversation.from_question("Summarize https://example.com"),
            )
    """

    def __init__(
        self,
        client: LLMClient | None = None,
        config: OrchestratorConfig | None = None,
        llm_callable: Callable[..., dict] | None = None,
    ) -> None:
        if client is None and llm_callable is None:
            raise LLMConfigError(
                "No LLM configured. Provide client= or llm_callable= to Orchestrator."
            )
        self._client = client
        self._llm = llm_callable
        self._config = config or OrchestratorConfig()
        self._state = OrchestratorState.IDLE
        self._stop_event = threading.Event()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def state(self) -> OrchestratorState:
        """Return the current orchestrator state."""
        return self._state

    @property
    def config(self) -> OrchestratorConfig:
        return self._config

    def run(self, tools: Sequence[ToolSpec], conversation: Conversation) -> str:
        """Drive the conversation to a final textual answer.

        Args:
            tools: Tools offered to the model. Passed unchanged every turn.
            conversation: Starting conversation. Never mutated; each tool
                turn produces a new value with the tool result appended.

        Returns:
            The text content of the first reply without a tool call
            (empty string if that reply has no content).

        Raises:
            ChatCompletionError: If a chat call fails or returns no usable
                candidate.
            MalformedToolArgumentsError: If tool arguments are unusable.
            FetchFailedError: If the fetch tool fails.
            ToolExecutionError: If a tool handler fails with an untyped error.
            UnknownToolError: If an unregistered tool is requested and
                ``strict_tools`` is set.
            TurnLimitExceededError: If ``max_turns`` chat calls all
                requested tools.
            RunCancelledError: If ``stop()`` was called.
        """
        registry = ToolRegistry(tools)
        tool_kwargs = self._tool_kwargs(tools)
        self._state = OrchestratorState.RUNNING

        try:
            turn = 0
            while True:
                self._check_cancelled()
                if turn >= self._config.max_turns:
                    raise TurnLimitExceededError(self._config.max_turns)
                turn += 1

                logger.debug(
                    "Turn %d: sending %d messages", turn, len(conversation)
                )
                response = self._call_llm(conversation, tool_kwargs)
                reply = self._select_reply(response)

                if reply.tool_call is None:
                    logger.debug("Turn %d: final answer received", turn)
                    return reply.text

                output, known = self._run_tool(registry, reply.tool_call)
                conversation = conversation.append(Message.tool_result(output))
                self._notify(
                    TurnRecord(
                        turn=turn,
                        tool_call=reply.tool_call,
                        output=output,
                        known_tool=known,
                    )
                )
        finally:
            if self._state == OrchestratorState.RUNNING:
                self._state = OrchestratorState.IDLE

    def stop(self) -> None:
        """Signal the orchestrator to stop.

        The running loop raises RunCancelledError before its next chat call
        or tool invocation. Stays in effect until ``reset()``.
        """
        self._stop_event.set()
        self._state = OrchestratorState.STOPPED

    def reset(self) -> None:
        """Clear a previous stop and return to IDLE."""
        self._stop_event.clear()
        self._state = OrchestratorState.IDLE

    # ------------------------------------------------------------------
    # Internal methods
    # ------------------------------------------------------------------

    def _check_cancelled(self) -> None:
        if self._stop_event.is_set():
            self._state = OrchestratorState.STOPPED
            raise RunCancelledError("Orchestrator run was stopped")

    def _tool_kwargs(self, tools: Sequence[ToolSpec]) -> dict[str, Any]:
        if not tools:
            return {}
        if self._config.use_legacy_functions:
            return {"functions": [t.to_function() for t in tools]}
        return {"tools": [t.to_openai() for t in tools]}

    def _call_llm(
        self, conversation: Conversation, tool_kwargs: dict[str, Any]
    ) -> dict:
        """Send one chat request.

        Failures that are not already PagecallErrors (e.g. from a custom
        ``llm_callable``) are wrapped in ChatCompletionError.
        """
        messages = conversation.to_openai()
        kwargs = {**tool_kwargs, **self._config.sampling.to_dict()}
        try:
            if self._llm is not None:
                return self._llm(messages=messages, **kwargs)
            return self._client.chat(messages, **kwargs)
        except PagecallError:
            raise
        except Exception as exc:
            raise ChatCompletionError(
                f"Chat completion failed: {type(exc).__name__}: {exc}"
            ) from exc

    def _select_reply(self, response: dict) -> Message:
        index = self._config.choice_index
        try:
            raw = response["choices"][index]["message"]
        except (KeyError, IndexError, TypeError) as exc:
            raise LLMResponseError(
                f"Response has no usable candidate at index {index}: {exc}"
            ) from exc
        if not isinstance(raw, dict):
            raise LLMResponseError(
                f"Candidate message is not an object: {raw!r}"
            )
        return Message.from_openai(raw)

    def _run_tool(
        self, registry: ToolRegistry, call: ToolCallRequest
    ) -> tuple[str, bool]:
        """Execute ``call`` and return (output, known_tool)."""
        logger.info("Tool call: %s %s", call.name, call.arguments)
        if not self._config.strict_tools and call.name not in registry:
            logger.warning("Unknown tool %r, using empty result", call.name)
            return "", False

        self._check_cancelled()
        output = registry.execute(call)
        logger.debug("Tool %s returned %d chars", call.name, len(output))
        return output, True

    def _notify(self, record: TurnRecord) -> None:
        callback = self._config.on_turn
        if callback is None:
            return
        try:
            callback(record)
        except Exception:
            logger.debug("on_turn callback error", exc_info=True)
