"""Agentic session endpoints."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from lmstudio_mcp import tools
from lmstudio_mcp.agent.models import ActInput
from lmstudio_mcp.context import ServerContext
from lmstudio_mcp.tools.schemas import DeleteSessionInput, GetSessionInput, RegisterToolsInput

from .deps import envelope_response, get_context

router = APIRouter(tags=["sessions"])


@router.post("/act")
async def act(
    data: ActInput,
    ctx: ServerContext = Depends(get_context),
) -> JSONResponse:
    """Start or continue an agentic task."""
    return envelope_response(await tools.act(ctx, data))


@router.post("/tool-sets")
async def register_tools(
    data: RegisterToolsInput,
    ctx: ServerContext = Depends(get_context),
) -> JSONResponse:
    """Register a reusable tool set."""
    return envelope_response(await tools.register_tools(ctx, data))


@router.get("/sessions")
async def list_sessions(ctx: ServerContext = Depends(get_context)) -> JSONResponse:
    """List session IDs."""
    return envelope_response(await tools.list_sessions(ctx))


@router.get("/sessions/{session_id}")
async def get_session_detail(
    session_id: str,
    include_messages: bool = False,
    delete_after_read: bool = False,
    ctx: ServerContext = Depends(get_context),
) -> JSONResponse:
    """Get a session's last response, and optionally its messages."""
    data = GetSessionInput(
        session_id=session_id,
        include_messages=include_messages,
        delete_after_read=delete_after_read,
    )
    return envelope_response(await tools.get_session(ctx, data))


@router.get("/sessions/{session_id}/info")
async def get_session_info(
    session_id: str,
    ctx: ServerContext = Depends(get_context),
) -> JSONResponse:
    """Get a session summary including remaining TTL."""
    return envelope_response(await tools.get_session_info(ctx, session_id))


@router.delete("/sessions/{session_id}")
async def delete_session(
    session_id: str,
    ctx: ServerContext = Depends(get_context),
) -> JSONResponse:
    """Delete a session."""
    return envelope_response(await tools.delete_session(ctx, DeleteSessionInput(session_id=session_id)))
