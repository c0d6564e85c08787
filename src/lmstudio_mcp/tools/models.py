"""Model management tools: health, list, load, unload, inspect."""

from lmstudio_mcp.context import ServerContext
from lmstudio_mcp.results import (
    ErrorCode,
    ToolResult,
    error_result,
    error_text,
    map_error_code,
    success_result,
    with_error_handling,
    with_timeout,
)

from .schemas import GetModelInfoInput, HealthCheckData, LoadModelInput, UnloadModelInput


async def health_check(ctx: ServerContext) -> ToolResult:
    """Check connectivity to the LM Studio server."""
    result = await ctx.backend.test_connection()
    if result.connected:
        return success_result(
            f"Connected to LM Studio at {result.base_url}",
            HealthCheckData(connected=True, base_url=result.base_url),
        )
    return error_result(
        f"Failed to connect to LM Studio at {result.base_url}",
        ErrorCode.CONNECTION_FAILED,
        result.error or "Connection failed",
    )


async def list_models(ctx: ServerContext) -> ToolResult:
    """List all downloaded LLM models."""

    async def operation() -> ToolResult:
        models = await ctx.backend.list_downloaded_models()
        return success_result(f"Found {len(models)} downloaded model(s)", models)

    return await with_error_handling(operation, "Failed to list models")


async def list_loaded_models(ctx: ServerContext) -> ToolResult:
    """List currently loaded LLM models."""

    async def operation() -> ToolResult:
        models = await ctx.backend.list_loaded_models()
        return success_result(f"Found {len(models)} loaded model(s)", models)

    return await with_error_handling(operation, "Failed to list loaded models")


async def load_model(ctx: ServerContext, data: LoadModelInput) -> ToolResult:
    """Load a model into memory with optional configuration."""

    async def operation() -> ToolResult:
        options = data.model_dump(exclude={"model"}, exclude_none=True)
        handle = await ctx.backend.load(data.model, options)
        return success_result(
            f"Model '{data.model}' loaded successfully with identifier '{handle.identifier}'",
            handle,
        )

    return await with_error_handling(
        operation, f"Failed to load model '{data.model}'", ErrorCode.LOAD_FAILED
    )


async def unload_model(ctx: ServerContext, data: UnloadModelInput) -> ToolResult:
    """Unload a model instance from memory."""
    # Not with_error_handling: MODEL_NOT_LOADED gets its own message
    try:
        await with_timeout(ctx.backend.unload(data.identifier), operation_name="Unload model")
    except Exception as e:
        code = map_error_code(e)
        if code == ErrorCode.MODEL_NOT_LOADED:
            return error_result(
                f"Model '{data.identifier}' is not currently loaded",
                ErrorCode.MODEL_NOT_LOADED,
                error_text(e),
            )
        final_code = ErrorCode.UNLOAD_FAILED if code == ErrorCode.UNKNOWN else code
        return error_result(f"Failed to unload model '{data.identifier}'", final_code, error_text(e))

    return success_result(f"Model '{data.identifier}' unloaded successfully")


async def get_model_info(ctx: ServerContext, data: GetModelInfoInput) -> ToolResult:
    """Detailed information about one loaded model instance."""

    async def operation() -> ToolResult:
        info = await ctx.backend.get_model_info(data.identifier)
        if info is None:
            return error_result(
                f"Model '{data.identifier}' not found or not loaded",
                ErrorCode.MODEL_NOT_LOADED,
                "Model not loaded",
            )
        return success_result(f"Retrieved information for model '{data.identifier}'", info)

    return await with_error_handling(
        operation, f"Failed to get information for model '{data.identifier}'"
    )
