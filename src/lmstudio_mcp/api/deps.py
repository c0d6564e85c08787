"""Shared dependencies and response helpers for the HTTP routes."""

from fastapi import Request, status
from fastapi.responses import JSONResponse

from lmstudio_mcp.context import ServerContext, create_context
from lmstudio_mcp.results import ErrorCode, ToolResult

_ERROR_STATUS = {
    ErrorCode.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorCode.MODEL_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.MODEL_NOT_LOADED: status.HTTP_404_NOT_FOUND,
    ErrorCode.CONNECTION_FAILED: status.HTTP_502_BAD_GATEWAY,
}


def get_context(request: Request) -> ServerContext:
    """Context attached to the app, created from the environment on first use."""
    context = getattr(request.app.state, "context", None)
    if context is None:
        context = create_context()
        request.app.state.context = context
    return context


def envelope_response(result: ToolResult) -> JSONResponse:
    """Envelope as the body; HTTP status derived from its error code."""
    if result.success:
        status_code = status.HTTP_200_OK
    else:
        code = result.error.code if result.error else ErrorCode.UNKNOWN
        status_code = _ERROR_STATUS.get(code, status.HTTP_500_INTERNAL_SERVER_ERROR)
    return JSONResponse(status_code=status_code, content=result.to_payload())
