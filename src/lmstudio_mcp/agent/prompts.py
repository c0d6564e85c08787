"""Prompt text for tool-using sessions."""

import json

from lmstudio_mcp.sessions.models import ToolSchema

from .models import ToolResultInput


def build_tool_system_prompt(tools: list[ToolSchema]) -> str:
    """System prompt listing the tools and the reply format for calling them."""
    lines = []
    for tool in tools:
        desc = f"- {tool.name}"
        if tool.description:
            desc += f": {tool.description}"
        if tool.parameters:
            desc += f"\n  Parameters: {json.dumps(tool.parameters, separators=(',', ':'))}"
        lines.append(desc)
    tool_descriptions = "\n".join(lines)

    return f"""You have access to the following tools:

{tool_descriptions}

When you need to use a tool, respond ONLY with a JSON object in this exact format (no other text):
{{"tool_calls": [{{"name": "tool_name", "arguments": {{"arg1": "value1"}}}}]}}

When you have completed the task or don't need tools, respond with your normal answer.
Do not explain that you're going to use a tool - just output the JSON or your final answer."""


def format_tool_results(tool_results: list[ToolResultInput]) -> str:
    """One ``[name]: result`` line per result."""
    return "\n".join(f"[{r.name}]: {r.result}" for r in tool_results)
