"""Result envelope shared by every tool, plus error classification."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any, Generic, TypeVar

import httpx
from pydantic import BaseModel

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TIMEOUT = 30  # seconds


class ErrorCode(str, Enum):
    """Stable error codes surfaced to callers."""

    MODEL_NOT_FOUND = "MODEL_NOT_FOUND"
    MODEL_NOT_LOADED = "MODEL_NOT_LOADED"
    CONNECTION_FAILED = "CONNECTION_FAILED"
    INVALID_INPUT = "INVALID_INPUT"
    LOAD_FAILED = "LOAD_FAILED"
    UNLOAD_FAILED = "UNLOAD_FAILED"
    UNKNOWN = "UNKNOWN"


class ToolError(BaseModel):
    code: ErrorCode
    message: str


class ToolResult(BaseModel, Generic[T]):
    """Envelope returned by every tool operation."""

    success: bool
    message: str
    data: T | None = None
    error: ToolError | None = None

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready dict without absent fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=2)


# --- Backend exceptions ---


class BackendError(Exception):
    """Failure reported by, or while talking to, the model-serving backend."""


class BackendConnectionError(BackendError):
    """The backend could not be reached."""


class BackendTimeoutError(BackendError, TimeoutError):
    """A backend operation exceeded its timeout."""


class ModelNotFoundError(BackendError):
    """The backend does not know the requested model."""


# --- Helpers ---


def success_result(message: str, data: Any = None) -> ToolResult:
    return ToolResult(success=True, message=message, data=data)


def error_result(
    message: str,
    code: ErrorCode = ErrorCode.UNKNOWN,
    error_message: str | None = None,
) -> ToolResult:
    """Build a failed envelope; ``error.message`` defaults to ``message``."""
    return ToolResult(
        success=False,
        message=message,
        error=ToolError(code=code, message=error_message or message),
    )


def error_text(error: BaseException) -> str:
    """Human-readable text for an exception, never empty."""
    text = str(error)
    return text or type(error).__name__ or "Unknown error"


def map_error_code(error: BaseException | str) -> ErrorCode:
    """Classify an error by the substrings of its message."""
    if isinstance(error, (httpx.ConnectError, httpx.ConnectTimeout, BackendConnectionError)):
        return ErrorCode.CONNECTION_FAILED

    message = str(error).lower()

    if "not found" in message or "no loaded model" in message:
        return ErrorCode.MODEL_NOT_LOADED
    if "connect" in message or "econnrefused" in message or "websocket" in message:
        return ErrorCode.CONNECTION_FAILED
    if "invalid" in message or "validation" in message:
        return ErrorCode.INVALID_INPUT

    return ErrorCode.UNKNOWN


async def with_error_handling(
    operation: Callable[[], Awaitable[ToolResult]],
    error_message_prefix: str,
    fallback_error_code: ErrorCode = ErrorCode.UNKNOWN,
) -> ToolResult:
    """Await ``operation`` and turn any exception into an error envelope."""
    try:
        return await operation()
    except Exception as e:
        code = map_error_code(e)
        final_code = fallback_error_code if code == ErrorCode.UNKNOWN else code
        logger.warning("%s: %s (%s)", error_message_prefix, e, final_code.value)
        return error_result(error_message_prefix, final_code, error_text(e))


async def with_timeout(
    awaitable: Awaitable[T],
    timeout_seconds: float = DEFAULT_TIMEOUT,
    operation_name: str = "Operation",
) -> T:
    """Await with a deadline.

    Raises:
        BackendTimeoutError: if the deadline passes. Only the waiter gives
            up; the backend may still finish the work.
    """
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout_seconds)
    except asyncio.TimeoutError:
        raise BackendTimeoutError(
            f"{operation_name} timed out after {timeout_seconds:g}s"
        ) from None
