"""Tool definitions and dispatch."""

from __future__ import annotations

from .dispatcher import ContentSegment, ToolDispatcher, ToolResult
from .schemas import TOOL_NAMES, TOOL_SPECS, ToolSpec

__all__ = ["ContentSegment", "ToolDispatcher", "ToolResult", "TOOL_NAMES", "TOOL_SPECS", "ToolSpec"]
