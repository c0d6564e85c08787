"""Server-side agentic sessions and tool sets."""

from .models import ChatMessage, Role, Session, SessionInfo, ToolSchema, ToolSet, utcnow
from .store import CLEANUP_INTERVAL, SESSION_TTL, SessionStore
from .tool_sets import ToolSetCache

__all__ = [
    "ChatMessage",
    "Role",
    "Session",
    "SessionInfo",
    "ToolSchema",
    "ToolSet",
    "SessionStore",
    "ToolSetCache",
    "SESSION_TTL",
    "CLEANUP_INTERVAL",
    "utcnow",
]
