"""Tool handlers shared by the MCP server and the HTTP API."""

from .models import get_model_info, health_check, list_loaded_models, list_models, load_model, unload_model
from .sessions import act, delete_session, get_session, get_session_info, list_sessions, register_tools
from .validation import format_validation_error, safe_tool_handler, validate_and_call

__all__ = [
    "act",
    "delete_session",
    "get_model_info",
    "get_session",
    "get_session_info",
    "health_check",
    "list_loaded_models",
    "list_models",
    "list_sessions",
    "load_model",
    "register_tools",
    "unload_model",
    "format_validation_error",
    "safe_tool_handler",
    "validate_and_call",
]
