"""Toolkit data models.

Frozen dataclass describing a tool the model may call.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

    from pydantic import BaseModel


@dataclass(frozen=True)
class ToolSpec:
    """A single tool definition for LLM consumption.

    Attributes:
        name: Unique tool name (e.g. "fetch_page_text").
        description: Human-readable description of when/why to use this tool.
        parameters: JSON Schema dict describing tool parameters.
        handler: Callable invoked with the validated arguments as keywords;
            returns the tool's text output.
        args_model: Optional pydantic model the raw arguments are validated
            against before the handler runs.
    """

    name: str
    description: str
    parameters: dict
    handler: Callable[..., str]
    args_model: type[BaseModel] | None = None

    def to_openai(self) -> dict:
        """Convert to OpenAI ``tools`` format.

        Returns:
            Dict with "type": "function" and nested "function" object.
        """
        return {
            "type": "function",
            "function": self.to_function(),
        }

    def to_function(self) -> dict:
        """Convert to the legacy ``functions`` format."""
        return {
            "name": self.name,
            "description": self.description,
            "parameters": self.parameters,
        }
