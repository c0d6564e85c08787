"""
Tests for the result envelope and error classification.
"""

import asyncio
import json

import httpx
import pytest

from lmstudio_mcp.results import (
    BackendConnectionError,
    BackendTimeoutError,
    ErrorCode,
    ModelNotFoundError,
    error_result,
    error_text,
    map_error_code,
    success_result,
    with_error_handling,
    with_timeout,
)


@pytest.mark.parametrize(
    "message, code",
    [
        ("Model 'x' not found", ErrorCode.MODEL_NOT_LOADED),
        ("No loaded model satisfies all requirements", ErrorCode.MODEL_NOT_LOADED),
        ("connect ECONNREFUSED 127.0.0.1:1234", ErrorCode.CONNECTION_FAILED),
        ("WebSocket closed unexpectedly", ErrorCode.CONNECTION_FAILED),
        ("Invalid context length", ErrorCode.INVALID_INPUT),
        ("Schema validation failed", ErrorCode.INVALID_INPUT),
        ("Out of memory", ErrorCode.UNKNOWN),
        # First matching rule wins
        ("connection not found", ErrorCode.MODEL_NOT_LOADED),
    ],
)
def test_map_error_code_by_message(message, code):
    """Error messages should map to codes by substring."""
    assert map_error_code(RuntimeError(message)) == code
    assert map_error_code(message) == code


def test_map_error_code_by_type():
    """Connection exception types should map to CONNECTION_FAILED."""
    assert map_error_code(BackendConnectionError("unreachable")) == ErrorCode.CONNECTION_FAILED
    assert map_error_code(httpx.ConnectError("refused")) == ErrorCode.CONNECTION_FAILED
    assert map_error_code(ModelNotFoundError("Model 'x' not found")) == ErrorCode.MODEL_NOT_LOADED


def test_error_result_defaults_detail_to_message():
    """error.message should default to the envelope message."""
    result = error_result("Something broke")

    assert result.success is False
    assert result.error.code == ErrorCode.UNKNOWN
    assert result.error.message == "Something broke"


def test_payload_omits_absent_fields():
    """Payloads should omit absent data and error."""
    assert success_result("ok").to_payload() == {"success": True, "message": "ok"}
    assert error_result("bad", ErrorCode.INVALID_INPUT, "x: required").to_payload() == {
        "success": False,
        "message": "bad",
        "error": {"code": "INVALID_INPUT", "message": "x: required"},
    }


def test_to_json_is_indented():
    """to_json should produce two-space indented JSON."""
    text = success_result("ok", {"a": 1}).to_json()

    assert text.startswith("{\n  ")
    assert json.loads(text) == {"success": True, "message": "ok", "data": {"a": 1}}


def test_error_text_never_empty():
    """error_text should fall back to the exception class name."""
    assert error_text(RuntimeError("boom")) == "boom"
    assert error_text(TimeoutError()) == "TimeoutError"


@pytest.mark.asyncio
async def test_with_error_handling_passes_success_through():
    """Successful operations should be returned unchanged."""
    async def operation():
        return success_result("fine")

    result = await with_error_handling(operation, "Failed")

    assert result.success is True


@pytest.mark.asyncio
async def test_with_error_handling_uses_fallback_for_unknown():
    """Unclassified errors should use the fallback code."""
    async def operation():
        raise RuntimeError("out of memory")

    result = await with_error_handling(operation, "Failed to load model 'm'", ErrorCode.LOAD_FAILED)

    assert result.message == "Failed to load model 'm'"
    assert result.error.code == ErrorCode.LOAD_FAILED
    assert result.error.message == "out of memory"


@pytest.mark.asyncio
async def test_with_error_handling_prefers_mapped_code():
    """A classified error should override the fallback code."""
    async def operation():
        raise RuntimeError("connect ECONNREFUSED")

    result = await with_error_handling(operation, "Failed", ErrorCode.LOAD_FAILED)

    assert result.error.code == ErrorCode.CONNECTION_FAILED


@pytest.mark.asyncio
async def test_with_timeout_returns_value():
    """with_timeout should return the awaited value."""
    async def quick():
        return 42

    assert await with_timeout(quick(), 1) == 42


@pytest.mark.asyncio
async def test_with_timeout_raises():
    """with_timeout should raise BackendTimeoutError past the deadline."""
    with pytest.raises(BackendTimeoutError) as exc_info:
        await with_timeout(asyncio.sleep(1), 0.01, "Unload model")

    assert str(exc_info.value) == "Unload model timed out after 0.01s"
    assert isinstance(exc_info.value, TimeoutError)
