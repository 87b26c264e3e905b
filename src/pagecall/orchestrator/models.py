"""Orchestrator turn records."""

from __future__ import annotations

from dataclasses import dataclass

from pagecall.models.messages import ToolCallRequest


@dataclass(frozen=True)
class TurnRecord:
    """What happened in one tool-calling turn.

    Frozen: turn records are immutable records of what happened.
    """

    turn: int
    tool_call: ToolCallRequest
    output: str = ""
    known_tool: bool = True
