"""MCP server exposing the LM Studio tools."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Annotated, Any

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from lmstudio_mcp.agent.models import ActInput
from lmstudio_mcp.context import ServerContext
from lmstudio_mcp.tools import (
    act,
    delete_session,
    get_model_info,
    get_session,
    health_check,
    list_loaded_models,
    list_models,
    load_model,
    register_tools,
    safe_tool_handler,
    unload_model,
    validate_and_call,
)
from lmstudio_mcp.tools.schemas import (
    DeleteSessionInput,
    GetModelInfoInput,
    GetSessionInput,
    LoadModelInput,
    RegisterToolsInput,
    UnloadModelInput,
)

SERVER_NAME = "lmstudio"


def _present(**params: Any) -> dict[str, Any]:
    """Drop arguments the caller left out."""
    return {k: v for k, v in params.items() if v is not None}


def create_mcp_server(ctx: ServerContext) -> FastMCP:
    """Build the MCP server with every tool bound to ``ctx``.

    Tool names and argument names are camelCase on the wire.
    """

    @asynccontextmanager
    async def lifespan(server: FastMCP) -> AsyncIterator[None]:
        try:
            yield
        finally:
            await ctx.aclose()

    mcp = FastMCP(SERVER_NAME, lifespan=lifespan)

    @mcp.tool(name="lmstudio_health_check", description="Check connectivity to LM Studio server")
    async def health_check_tool() -> str:
        return await safe_tool_handler(lambda: health_check(ctx))

    @mcp.tool(name="lmstudio_list_models", description="List all downloaded LLM models available in LM Studio")
    async def list_models_tool() -> str:
        return await safe_tool_handler(lambda: list_models(ctx))

    @mcp.tool(name="lmstudio_list_loaded_models", description="List all currently loaded LLM models in LM Studio")
    async def list_loaded_models_tool() -> str:
        return await safe_tool_handler(lambda: list_loaded_models(ctx))

    @mcp.tool(name="lmstudio_load_model", description="Load a model into memory in LM Studio")
    async def load_model_tool(
        model: Annotated[str, Field(description="The model key to load (e.g., 'llama-3.2-3b-instruct')")],
        identifier: Annotated[str | None, Field(description="Custom identifier for the loaded model instance")] = None,
        contextLength: Annotated[int | None, Field(description="Context window size in tokens")] = None,
        evalBatchSize: Annotated[
            int | None, Field(description="Number of tokens to process together in a batch")
        ] = None,
    ) -> str:
        params = _present(
            model=model, identifier=identifier, contextLength=contextLength, evalBatchSize=evalBatchSize
        )
        return await safe_tool_handler(
            lambda: validate_and_call(LoadModelInput, params, lambda data: load_model(ctx, data))
        )

    @mcp.tool(name="lmstudio_unload_model", description="Unload a model from memory in LM Studio")
    async def unload_model_tool(
        identifier: Annotated[str, Field(description="The model instance identifier to unload")],
    ) -> str:
        return await safe_tool_handler(
            lambda: validate_and_call(
                UnloadModelInput, {"identifier": identifier}, lambda data: unload_model(ctx, data)
            )
        )

    @mcp.tool(
        name="lmstudio_get_model_info",
        description="Get detailed information about a specific loaded model in LM Studio",
    )
    async def get_model_info_tool(
        identifier: Annotated[str, Field(description="The model instance identifier to get information about")],
    ) -> str:
        return await safe_tool_handler(
            lambda: validate_and_call(
                GetModelInfoInput, {"identifier": identifier}, lambda data: get_model_info(ctx, data)
            )
        )

    @mcp.tool(
        name="lmstudio_act",
        description=(
            "Run an agentic task with a local LM Studio model. Supports tool use via "
            "request/response pattern - model can request tool calls which are returned "
            "to caller for execution."
        ),
    )
    async def act_tool(
        sessionId: Annotated[str | None, Field(description="Resume existing session (omit to start new)")] = None,
        identifier: Annotated[str | None, Field(description="The loaded model identifier to use")] = None,
        task: Annotated[str | None, Field(description="The task or prompt for the model")] = None,
        tools: Annotated[
            list[dict[str, Any]] | None, Field(description="Tool schemas available for the model to call")
        ] = None,
        toolSetId: Annotated[str | None, Field(description="ID of a registered tool set to offer the model")] = None,
        toolResults: Annotated[
            list[dict[str, Any]] | None, Field(description="Results from previously requested tool calls")
        ] = None,
        maxTokens: Annotated[int | None, Field(description="Maximum tokens to generate")] = None,
    ) -> str:
        params = _present(
            sessionId=sessionId,
            identifier=identifier,
            task=task,
            tools=tools,
            toolSetId=toolSetId,
            toolResults=toolResults,
            maxTokens=maxTokens,
        )
        return await safe_tool_handler(
            lambda: validate_and_call(ActInput, params, lambda data: act(ctx, data))
        )

    @mcp.tool(
        name="lmstudio_get_session",
        description=(
            "Read the response from a completed agentic session. Use this to fetch the full "
            "response text only when needed, reducing token usage."
        ),
    )
    async def get_session_tool(
        sessionId: Annotated[str, Field(description="The session ID to retrieve")],
        includeMessages: Annotated[
            bool | None, Field(description="Include full message history (default: false)")
        ] = None,
        deleteAfterRead: Annotated[
            bool | None, Field(description="Delete session after reading (default: false)")
        ] = None,
    ) -> str:
        params = _present(
            sessionId=sessionId, includeMessages=includeMessages, deleteAfterRead=deleteAfterRead
        )
        return await safe_tool_handler(
            lambda: validate_and_call(GetSessionInput, params, lambda data: get_session(ctx, data))
        )

    @mcp.tool(name="lmstudio_delete_session", description="Delete an agentic session and free its resources")
    async def delete_session_tool(
        sessionId: Annotated[str, Field(description="The session ID to delete")],
    ) -> str:
        return await safe_tool_handler(
            lambda: validate_and_call(
                DeleteSessionInput, {"sessionId": sessionId}, lambda data: delete_session(ctx, data)
            )
        )

    @mcp.tool(
        name="lmstudio_register_tools",
        description=(
            "Register a set of tool schemas for reuse across agentic sessions. "
            "Pass the returned toolSetId to lmstudio_act instead of resending the schemas."
        ),
    )
    async def register_tools_tool(
        tools: Annotated[list[dict[str, Any]], Field(description="Tool schemas to register")],
        toolSetId: Annotated[
            str | None, Field(description="Custom ID for the tool set (auto-generated if omitted)")
        ] = None,
    ) -> str:
        params = _present(tools=tools, toolSetId=toolSetId)
        return await safe_tool_handler(
            lambda: validate_and_call(RegisterToolsInput, params, lambda data: register_tools(ctx, data))
        )

    return mcp
