"""Session and tool-set records."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import Field

from lmstudio_mcp.schema import CamelModel


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class Role(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(CamelModel):
    role: Role
    content: str


class ToolSchema(CamelModel):
    """A tool the model may ask the caller to run."""

    name: str
    description: str | None = None
    parameters: dict[str, Any] | None = None


@dataclass
class Session:
    """One multi-turn agentic conversation held server-side."""

    id: str
    model_id: str
    messages: list[ChatMessage] = field(default_factory=list)
    tools: list[ToolSchema] = field(default_factory=list)
    created_at: datetime = field(default_factory=utcnow)
    last_accessed_at: datetime = field(default_factory=utcnow)

    @property
    def last_response(self) -> str | None:
        """Content of the most recent assistant message, if any."""
        for message in reversed(self.messages):
            if message.role == Role.ASSISTANT:
                return message.content
        return None


@dataclass
class ToolSet:
    """Reusable bundle of tool schemas, independent of any session."""

    id: str
    tools: list[ToolSchema]
    created_at: datetime = field(default_factory=utcnow)
    last_accessed_at: datetime = field(default_factory=utcnow)


class SessionInfo(CamelModel):
    """Session summary without the message log."""

    session_id: str
    model_id: str
    message_count: int
    tool_count: int
    created_at: datetime
    last_accessed_at: datetime
    ttl_remaining_ms: int = Field(description="Milliseconds until the session expires")
