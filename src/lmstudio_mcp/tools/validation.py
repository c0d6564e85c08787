"""Input validation and exception containment for tool calls."""

import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError

from lmstudio_mcp.results import ErrorCode, ToolResult, error_result, error_text

logger = logging.getLogger(__name__)

InputT = TypeVar("InputT", bound=BaseModel)


def format_validation_error(error: ValidationError | RequestValidationError) -> str:
    """``field: problem`` pairs joined by "; ".

    The ``body`` prefix FastAPI adds to request-body locations is dropped.
    """
    issues = []
    for issue in error.errors():
        path = ".".join(str(part) for part in issue["loc"] if part != "body")
        issues.append(f"{path}: {issue['msg']}" if path else issue["msg"])
    return "; ".join(issues)


async def validate_and_call(
    schema: type[InputT],
    params: dict[str, Any],
    handler: Callable[[InputT], Awaitable[ToolResult]],
) -> ToolResult:
    """Validate ``params`` into ``schema`` and call ``handler``.

    Returns an INVALID_INPUT envelope if validation fails.
    """
    try:
        data = schema.model_validate(params)
    except ValidationError as e:
        return error_result(
            "Invalid input parameters",
            ErrorCode.INVALID_INPUT,
            format_validation_error(e),
        )
    return await handler(data)


async def safe_tool_handler(handler: Callable[[], Awaitable[ToolResult]]) -> str:
    """Run a tool and return its envelope as JSON text; never raises."""
    try:
        result = await handler()
    except Exception as e:
        logger.exception("Unexpected error in tool handler")
        result = error_result("An unexpected error occurred", ErrorCode.UNKNOWN, error_text(e))
    return result.to_json()
