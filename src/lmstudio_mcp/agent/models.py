"""Inputs and outputs of one act turn."""

from typing import Any

from pydantic import Field

from lmstudio_mcp.schema import CamelModel
from lmstudio_mcp.sessions.models import ToolSchema

DEFAULT_MAX_TOKENS = 2048


class ToolResultInput(CamelModel):
    """Output of a tool the caller ran on the model's behalf."""

    name: str
    result: str


class ActInput(CamelModel):
    # Session management
    session_id: str | None = Field(default=None, description="Resume existing session (omit to start new)")

    # Required for new sessions (when no sessionId)
    identifier: str | None = Field(default=None, min_length=1, description="The loaded model identifier to use")
    task: str | None = Field(default=None, min_length=1, description="The task or prompt for the model")
    tools: list[ToolSchema] | None = Field(default=None, description="Tool schemas available for the model to call")
    tool_set_id: str | None = Field(default=None, description="ID of a registered tool set to offer the model")

    # For continuing sessions
    tool_results: list[ToolResultInput] | None = Field(
        default=None, description="Results from previously requested tool calls"
    )

    max_tokens: int | None = Field(default=None, ge=1, description="Maximum tokens to generate")


class ToolCallRequest(CamelModel):
    """A tool invocation requested by the model, passed through unvalidated."""

    name: str
    arguments: Any = None


class ResponseStats(CamelModel):
    message_count: int
    response_length: int


class ActData(CamelModel):
    session_id: str
    done: bool
    tool_calls: list[ToolCallRequest] | None = None
    stats: ResponseStats | None = None
