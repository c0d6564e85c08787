"""Agentic act workflow."""

from .engine import ActEngine
from .models import (
    DEFAULT_MAX_TOKENS,
    ActData,
    ActInput,
    ResponseStats,
    ToolCallRequest,
    ToolResultInput,
)
from .parser import parse_tool_calls
from .prompts import build_tool_system_prompt, format_tool_results

__all__ = [
    "ActEngine",
    "ActData",
    "ActInput",
    "ResponseStats",
    "ToolCallRequest",
    "ToolResultInput",
    "DEFAULT_MAX_TOKENS",
    "parse_tool_calls",
    "build_tool_system_prompt",
    "format_tool_results",
]
