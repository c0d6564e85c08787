"""Agentic session tools: act, read, delete, register tool sets."""

from lmstudio_mcp.agent.models import ActInput
from lmstudio_mcp.context import ServerContext
from lmstudio_mcp.results import ErrorCode, ToolResult, error_result, success_result

from .schemas import (
    DeleteSessionData,
    DeleteSessionInput,
    GetSessionData,
    GetSessionInput,
    RegisterToolsData,
    RegisterToolsInput,
    SessionListData,
)


def _session_not_found(session_id: str) -> ToolResult:
    return error_result(
        "Session not found or expired",
        ErrorCode.INVALID_INPUT,
        f"Session '{session_id}' does not exist or has expired",
    )


async def act(ctx: ServerContext, data: ActInput) -> ToolResult:
    """
    Run an agentic task with a local model.

    The model may request tool calls, which are returned to the caller
    for execution and fed back with ``tool_results`` on the next call.
    """
    return await ctx.engine.act(data)


async def get_session(ctx: ServerContext, data: GetSessionInput) -> ToolResult:
    """
    Session details and, optionally, the full conversation history.

    This is how a caller reads the final response of a completed task
    without it being included in every act() response.
    """
    session = ctx.store.get_session(data.session_id)
    if session is None:
        return _session_not_found(data.session_id)

    payload = GetSessionData(
        session_id=session.id,
        model_id=session.model_id,
        message_count=len(session.messages),
        last_response=session.last_response,
        messages=list(session.messages) if data.include_messages else None,
    )

    if data.delete_after_read:
        ctx.store.delete_session(session.id)

    return success_result("Session retrieved", payload)


async def get_session_info(ctx: ServerContext, session_id: str) -> ToolResult:
    info = ctx.store.get_session_info(session_id)
    if info is None:
        return _session_not_found(session_id)
    return success_result("Session info retrieved", info)


async def list_sessions(ctx: ServerContext) -> ToolResult:
    session_ids = ctx.store.list_sessions()
    return success_result(
        f"Found {len(session_ids)} session(s)",
        SessionListData(session_ids=session_ids, count=len(session_ids)),
    )


async def delete_session(ctx: ServerContext, data: DeleteSessionInput) -> ToolResult:
    """Delete a session ahead of its TTL."""
    if not ctx.store.delete_session(data.session_id):
        return error_result(
            "Session not found or already deleted",
            ErrorCode.INVALID_INPUT,
            f"Session '{data.session_id}' does not exist or has already been deleted",
        )
    return success_result(
        "Session deleted",
        DeleteSessionData(session_id=data.session_id, deleted=True),
    )


async def register_tools(ctx: ServerContext, data: RegisterToolsInput) -> ToolResult:
    """
    Register tools for reuse across sessions.

    Later act() calls reference the set by id instead of resending the
    schemas.
    """
    tool_set = ctx.store.register_tool_set(data.tools, data.tool_set_id)
    return success_result(
        "Tool set registered",
        RegisterToolsData(
            tool_set_id=tool_set.id,
            tool_count=len(tool_set.tools),
            tool_names=[t.name for t in tool_set.tools],
        ),
    )
