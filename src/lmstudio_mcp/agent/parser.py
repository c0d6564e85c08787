"""Best-effort extraction of tool calls from model output."""

import json
import re
from typing import Any

from .models import ToolCallRequest

# First fenced block only, optionally tagged json
_CODE_BLOCK = re.compile(r"```(?:json)?\s*(\{.*?\})\s*```", re.DOTALL)


def _tool_calls_from_json(text: str) -> list[ToolCallRequest] | None:
    try:
        parsed: Any = json.loads(text)
    except (ValueError, RecursionError):
        # RecursionError: nesting deeper than the decoder's stack allows
        return None

    if not isinstance(parsed, dict) or not isinstance(parsed.get("tool_calls"), list):
        return None

    return [
        ToolCallRequest(name=tc["name"], arguments=tc.get("arguments"))
        for tc in parsed["tool_calls"]
        if isinstance(tc, dict) and isinstance(tc.get("name"), str)
    ]


def parse_tool_calls(text: str) -> list[ToolCallRequest] | None:
    """
    Tool calls encoded in ``text``, or None for a final answer.

    Tries the whole trimmed text as JSON, then the first fenced code
    block. Only an object carrying a ``tool_calls`` array counts; any
    other JSON, malformed or too deeply nested JSON, is a final answer.
    """
    trimmed = text.strip()

    calls = _tool_calls_from_json(trimmed)
    if calls is not None:
        return calls

    match = _CODE_BLOCK.search(trimmed)
    if match:
        return _tool_calls_from_json(match.group(1))

    return None
