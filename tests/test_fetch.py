"""Tests for the page-text fetch tool.

Tests cover the trim window (including its boundary and the short-text
clamp), HTML rendering, request headers, failure mapping, and the tool
definition. HTTP is served by httpx.MockTransport -- no network access.
Includes property-based tests via Hypothesis.
"""

from __future__ import annotations

import httpx
import pytest
from hypothesis import given
from hypothesis import strategies as st

from pagecall.exceptions import FetchFailedError
from pagecall.toolkit.fetch import (
    DEFAULT_USER_AGENT,
    FETCH_TOOL_NAME,
    HEAD_LINES,
    TAIL_LINES,
    PageFetcher,
    default_tools,
    fetch_page_text,
    render_text,
    trim_lines,
)


def numbered_lines(n: int) -> str:
    """Text of n lines: 'line 1' ... 'line n'."""
    return "\n".join(f"line {i}" for i in range(1, n + 1))


def identity_renderer(markup: str, width: int) -> str:
    return markup


def make_fetcher(handler, **kwargs) -> PageFetcher:
    return PageFetcher(transport=httpx.MockTransport(handler), **kwargs)


# ---------------------------------------------------------------------------
# Trim window
# ---------------------------------------------------------------------------


class TestTrimLines:
    def test_181_lines_keeps_line_31(self):
        assert trim_lines(numbered_lines(181)) == "line 31"

    def test_keeps_middle_window(self):
        result = trim_lines(numbered_lines(200)).split("\n")
        assert result[0] == "line 31"
        assert result[-1] == "line 50"
        assert len(result) == 20

    @pytest.mark.parametrize("n", [1, 30, 150, 179, 180])
    def test_short_text_returned_unchanged(self, n):
        text = numbered_lines(n)
        assert trim_lines(text) == text

    def test_empty_text(self):
        assert trim_lines("") == ""

    def test_custom_window(self):
        assert trim_lines(numbered_lines(5), head=1, tail=1) == "line 2\nline 3\nline 4"

    @given(st.integers(min_value=HEAD_LINES + TAIL_LINES + 1, max_value=600))
    def test_long_text_drops_exact_counts(self, n):
        result = trim_lines(numbered_lines(n)).split("\n")
        assert len(result) == n - HEAD_LINES - TAIL_LINES
        assert result[0] == f"line {HEAD_LINES + 1}"
        assert result[-1] == f"line {n - TAIL_LINES}"

    @given(st.integers(min_value=1, max_value=HEAD_LINES + TAIL_LINES))
    def test_short_text_never_fails(self, n):
        text = numbered_lines(n)
        assert trim_lines(text) == text


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


class TestRenderText:
    def test_strips_markup(self):
        text = render_text("<html><body><h1>Title</h1><p>Hello <b>world</b></p></body></html>")
        assert "Title" in text
        assert "Hello" in text
        assert "<p>" not in text

    def test_wraps_at_width(self):
        paragraph = "<p>" + " ".join(["word"] * 200) + "</p>"
        lines = [line for line in render_text(paragraph, width=40).split("\n") if line]
        assert len(lines) > 1
        assert max(len(line) for line in lines) <= 40


# ---------------------------------------------------------------------------
# Fetching
# ---------------------------------------------------------------------------


class TestPageFetcher:
    def test_sends_browser_user_agent(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["ua"] = request.headers.get("User-Agent")
            return httpx.Response(200, text="<p>hi</p>")

        with make_fetcher(handler) as fetcher:
            fetcher.fetch_page_text("https://example.com")

        assert seen["ua"] == DEFAULT_USER_AGENT

    def test_returns_trimmed_rendered_text(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text=numbered_lines(181))

        with make_fetcher(handler, renderer=identity_renderer) as fetcher:
            assert fetcher.fetch_page_text("https://example.com") == "line 31"

    def test_short_page_returned_whole(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<p>Short page body.</p>")

        with make_fetcher(handler) as fetcher:
            assert "Short page body." in fetcher.fetch_page_text("https://example.com")

    def test_renderer_receives_width(self):
        widths = []

        def renderer(markup: str, width: int) -> str:
            widths.append(width)
            return markup

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="x")

        with make_fetcher(handler, renderer=renderer, width=72) as fetcher:
            fetcher.fetch_page_text("https://example.com")

        assert widths == [72]

    def test_transport_error_raises_fetch_failed(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with make_fetcher(handler) as fetcher:
            with pytest.raises(FetchFailedError) as exc_info:
                fetcher.fetch_page_text("https://unreachable.example")

        assert exc_info.value.url == "https://unreachable.example"
        assert "ConnectError" in str(exc_info.value)

    def test_http_error_status_raises_fetch_failed(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, text="not found")

        with make_fetcher(handler) as fetcher:
            with pytest.raises(FetchFailedError, match="HTTP 404"):
                fetcher.fetch_page_text("https://example.com/missing")

    def test_follows_redirects(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/old":
                return httpx.Response(301, headers={"Location": "https://example.com/new"})
            return httpx.Response(200, text="moved here")

        with make_fetcher(handler, renderer=identity_renderer) as fetcher:
            assert fetcher.fetch_page_text("https://example.com/old") == "moved here"


class TestFetchTool:
    def test_tool_definition(self):
        with PageFetcher() as fetcher:
            tool = fetcher.as_tool()

        assert tool.name == FETCH_TOOL_NAME
        assert tool.parameters["required"] == ["url"]
        assert tool.to_openai()["function"]["name"] == FETCH_TOOL_NAME

    def test_handler_fetches(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text=str(request.url))

        with make_fetcher(handler, renderer=identity_renderer) as fetcher:
            (tool,) = default_tools(fetcher)
            assert tool.handler(url="https://example.com/a") == "https://example.com/a"


class TestFetchPageTextFunction:
    def test_forwards_fetcher_options(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, text=numbered_lines(181))

        result = fetch_page_text(
            "https://example.com",
            transport=httpx.MockTransport(handler),
            renderer=identity_renderer,
        )

        assert result == "line 31"
        assert len(seen) == 1
        assert seen[0].headers["User-Agent"] == DEFAULT_USER_AGENT

    def test_failure_raises_fetch_failed(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, text="boom")

        with pytest.raises(FetchFailedError, match="HTTP 500"):
            fetch_page_text("https://example.com", transport=httpx.MockTransport(handler))
