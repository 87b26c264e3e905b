"""Orchestrator configuration types.

Provides OrchestratorState and OrchestratorConfig.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

from pagecall.models.config import SamplingConfig

if TYPE_CHECKING:
    from pagecall.orchestrator.models import TurnRecord


class OrchestratorState(str, enum.Enum):
    """States the orchestrator can be in during its lifecycle."""

    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


@dataclass
class OrchestratorConfig:
    """Configuration for the function-calling loop.

    Mutable dataclass -- users may adjust settings between runs.

    Attributes:
        sampling: Sampling settings forwarded unchanged on every chat call.
        max_turns: Maximum number of chat calls per run. Exceeding it
            raises TurnLimitExceededError.
        choice_index: Which candidate completion to act on.
        strict_tools: When True, an unregistered tool name raises
            UnknownToolError. When False, it yields an empty tool result.
        use_legacy_functions: Send tools as the legacy ``functions``
            payload instead of ``tools``.
        on_turn: Callback invoked after each turn that executed a tool.
    """

    sampling: SamplingConfig = field(default_factory=SamplingConfig)
    max_turns: int = 10
    choice_index: int = 0
    strict_tools: bool = True
    use_legacy_functions: bool = False
    on_turn: Callable[[TurnRecord], None] | None = None

    def __post_init__(self) -> None:
        if self.max_turns < 1:
            raise ValueError(f"max_turns must be >= 1, got {self.max_turns}")
        if self.choice_index < 0:
            raise ValueError(f"choice_index must be >= 0, got {self.choice_index}")
