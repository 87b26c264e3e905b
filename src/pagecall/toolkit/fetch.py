"""Page-text fetch tool.

Fetches a URL with a browser User-Agent, renders the markup to plain text
with html2text, and trims a fixed window of lines off both ends, where
navigation, headers and footers usually sit. The trim is a crude
positional heuristic; no DOM-aware extraction is attempted.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import html2text
import httpx
from pydantic import BaseModel, Field

from pagecall.exceptions import FetchFailedError
from pagecall.toolkit.models import ToolSpec

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)

FETCH_TOOL_NAME = "fetch_page_text"

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/109.0.0.0 Safari/537.36"
)
RENDER_WIDTH = 100
HEAD_LINES = 30
TAIL_LINES = 150


class FetchPageArgs(BaseModel):
    """Arguments accepted by the fetch tool."""

    url: str = Field(min_length=1)


def render_text(markup: str, width: int = RENDER_WIDTH) -> str:
    """Convert HTML markup to plain text wrapped at ``width`` columns."""
    converter = html2text.HTML2Text()
    converter.body_width = width
    return converter.handle(markup)


def trim_lines(text: str, head: int = HEAD_LINES, tail: int = TAIL_LINES) -> str:
    """Drop the first ``head`` and last ``tail`` lines of ``text``.

    Text with ``head + tail`` lines or fewer has no window left to keep and
    is returned unchanged.
    """
    lines = text.split("\n")
    if len(lines) <= head + tail:
        logger.debug(
            "Text has %d lines (<= %d), skipping trim", len(lines), head + tail
        )
        return text
    return "\n".join(lines[head : len(lines) - tail])


class PageFetcher:
    """Fetches pages and returns their trimmed text.

    Usage::

        with PageFetcher() as fetcher:
            text = fetcher.fetch_page_text("https://example.com/article")
            tool = fetcher.as_tool()
    """

    def __init__(
        self,
        *,
        user_agent: str = DEFAULT_USER_AGENT,
        width: int = RENDER_WIDTH,
        head_lines: int = HEAD_LINES,
        tail_lines: int = TAIL_LINES,
        timeout: float = 30.0,
        renderer: Callable[[str, int], str] = render_text,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._width = width
        self._head_lines = head_lines
        self._tail_lines = tail_lines
        self._renderer = renderer
        self._client = httpx.Client(
            timeout=timeout,
            headers={"User-Agent": user_agent},
            follow_redirects=True,
            transport=transport,
        )

    def fetch_markup(self, url: str) -> str:
        """GET ``url`` and return the response body.

        Raises:
            FetchFailedError: On transport errors or a non-2xx status.
        """
        try:
            response = self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise FetchFailedError(
                url, f"HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise FetchFailedError(url, f"{type(exc).__name__}: {exc}") from exc
        return response.text

    def fetch_page_text(self, url: str) -> str:
        """Fetch ``url`` and return its rendered, trimmed text."""
        markup = self.fetch_markup(url)
        text = self._renderer(markup, self._width)
        return trim_lines(text, self._head_lines, self._tail_lines)

    def as_tool(self) -> ToolSpec:
        """Build the ToolSpec exposing this fetcher to the model."""
        return ToolSpec(
            name=FETCH_TOOL_NAME,
            description=(
                "Fetch a web page by URL and return its text content. Use "
                "this when the user refers to a page or when answering needs "
                "the contents of a specific website."
            ),
            parameters={
                "type": "object",
                "properties": {
                    "url": {
                        "type": "string",
                        "description": (
                            "Absolute URL of the page, e.g. https://www.google.com"
                        ),
                    },
                },
                "required": ["url"],
            },
            handler=lambda url: self.fetch_page_text(url),
            args_model=FetchPageArgs,
        )

    def close(self) -> None:
        """Close the underlying httpx client."""
        self._client.close()

    def __enter__(self) -> PageFetcher:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


def fetch_page_text(url: str, **kwargs: object) -> str:
    """Fetch ``url`` once with a short-lived PageFetcher.

    Keyword arguments are forwarded to ``PageFetcher``.
    """
    with PageFetcher(**kwargs) as fetcher:  # type: ignore[arg-type]
        return fetcher.fetch_page_text(url)


def default_tools(fetcher: PageFetcher) -> list[ToolSpec]:
    """Return the built-in tool set bound to ``fetcher``."""
    return [fetcher.as_tool()]
