"""Orchestrator package -- the function-calling loop and its configuration."""

from pagecall.orchestrator.config import OrchestratorConfig, OrchestratorState
from pagecall.orchestrator.loop import Orchestrator
from pagecall.orchestrator.models import TurnRecord

__all__ = [
    "Orchestrator",
    "OrchestratorConfig",
    "OrchestratorState",
    "TurnRecord",
]
