"""Toolkit package -- tool definitions, registry, and the page-text fetch tool."""

from pagecall.toolkit.fetch import (
    FETCH_TOOL_NAME,
    FetchPageArgs,
    PageFetcher,
    default_tools,
    fetch_page_text,
    render_text,
    trim_lines,
)
from pagecall.toolkit.models import ToolSpec
from pagecall.toolkit.registry import ToolRegistry

__all__ = [
    "FETCH_TOOL_NAME",
    "FetchPageArgs",
    "PageFetcher",
    "ToolRegistry",
    "ToolSpec",
    "default_tools",
    "fetch_page_text",
    "render_text",
    "trim_lines",
]
