"""Rich formatting helpers for the pagecall CLI.

Rich auto-detects TTY and degrades gracefully when piped (no ANSI codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape

if TYPE_CHECKING:
    from pagecall.orchestrator.models import TurnRecord


def get_console() -> Console:
    """Create a Rich Console that auto-detects TTY for graceful pipe degradation."""
    return Console(stderr=False)


def format_turn(record: TurnRecord, console: Console) -> None:
    """Display a one-line summary of a tool turn."""
    status = "" if record.known_tool else " [yellow](unknown tool)[/yellow]"
    console.print(
        f"[dim]turn {record.turn}: {escape(record.tool_call.name)} "
        f"{escape(record.tool_call.arguments)} -> {len(record.output)} chars[/dim]"
        f"{status}",
        highlight=False,
    )


def format_answer(text: str, console: Console) -> None:
    """Display the final answer."""
    if not text:
        console.print("[dim](empty answer)[/dim]")
        return
    console.print(escape(text), highlight=False)


def format_error(message: str, console: Console) -> None:
    """Display an error message."""
    console.print(f"[red]Error:[/red] {escape(message)}", highlight=False)
