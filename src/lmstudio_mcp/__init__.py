"""MCP server for LM Studio with server-side agentic sessions."""

__version__ = "1.0.0"
