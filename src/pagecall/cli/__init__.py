"""Pagecall CLI -- ask one question, let the model fetch pages, print the answer.

This module is NEVER imported from pagecall/__init__.py.
It is only loaded via the ``pagecall`` entry point defined in pyproject.toml.
"""

from __future__ import annotations

import logging
from dataclasses import replace

try:
    import click
    from rich.console import Console
    from rich.logging import RichHandler
except ImportError:
    raise ImportError(
        "CLI dependencies not installed. Install with: pip install pagecall[cli]"
    ) from None

from pagecall.cli.formatting import format_answer, format_error, format_turn, get_console
from pagecall.exceptions import PagecallError
from pagecall.models.config import SamplingConfig
from pagecall.models.messages import Conversation
from pagecall.orchestrator import Orchestrator, OrchestratorConfig
from pagecall.settings import create_client, load_settings
from pagecall.toolkit.fetch import PageFetcher, default_tools


def _configure_logging(verbose: bool) -> None:
    """Route pagecall logs to stderr through rich."""
    logger = logging.getLogger("pagecall")
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(console=Console(stderr=True), show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)


@click.command()
@click.argument("question")
@click.option(
    "--system",
    "system_prompt",
    default=None,
    help="Optional system prompt prepended to the conversation.",
)
@click.option("--model", default=None, help="Model name (overrides PAGECALL_MODEL).")
@click.option(
    "--max-turns",
    type=click.IntRange(min=1),
    default=None,
    help="Maximum chat calls before giving up (overrides PAGECALL_MAX_TURNS).",
)
@click.option("--temperature", type=float, default=None, help="Sampling temperature.")
@click.option(
    "--env-file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path to a .env file (default: search from the working directory).",
)
@click.option(
    "--lenient-tools",
    is_flag=True,
    help="Treat unknown tool names as empty results instead of failing.",
)
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr.")
def cli(
    question: str,
    system_prompt: str | None,
    model: str | None,
    max_turns: int | None,
    temperature: float | None,
    env_file: str | None,
    lenient_tools: bool,
    verbose: bool,
) -> None:
    """Answer QUESTION, fetching any web pages the model asks for."""
    console = get_console()
    _configure_logging(verbose)

    try:
        settings = load_settings(env_file)
        sampling = SamplingConfig(model=model or settings.model)
        if temperature is not None:
            sampling = replace(sampling, temperature=temperature)
        config = OrchestratorConfig(
            sampling=sampling,
            max_turns=max_turns or settings.max_turns,
            strict_tools=not lenient_tools,
            on_turn=lambda record: format_turn(record, console),
        )

        client = create_client(settings)
        try:
            with PageFetcher(timeout=settings.fetch_timeout) as fetcher:
                answer = Orchestrator(client=client, config=config).run(
                    default_tools(fetcher),
                    Conversation.from_question(question, system_prompt),
                )
        finally:
            client.close()
    except PagecallError as e:
        format_error(str(e), console)
        raise SystemExit(1) from None

    format_answer(answer, console)


def main() -> None:
    cli()
