"""Model management endpoints."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from lmstudio_mcp import tools
from lmstudio_mcp.context import ServerContext
from lmstudio_mcp.tools.schemas import GetModelInfoInput, LoadModelInput, UnloadModelInput

from .deps import envelope_response, get_context

router = APIRouter(prefix="/models", tags=["models"])

# Identifiers may contain "/" (publisher/model); fixed routes must stay first.


@router.get("/health")
async def backend_health(ctx: ServerContext = Depends(get_context)) -> JSONResponse:
    """Check connectivity to LM Studio."""
    return envelope_response(await tools.health_check(ctx))


@router.get("")
async def list_models(ctx: ServerContext = Depends(get_context)) -> JSONResponse:
    """List downloaded models."""
    return envelope_response(await tools.list_models(ctx))


@router.get("/loaded")
async def list_loaded_models(ctx: ServerContext = Depends(get_context)) -> JSONResponse:
    """List loaded models."""
    return envelope_response(await tools.list_loaded_models(ctx))


@router.post("/load")
async def load_model(
    data: LoadModelInput,
    ctx: ServerContext = Depends(get_context),
) -> JSONResponse:
    """Load a model."""
    return envelope_response(await tools.load_model(ctx, data))


@router.post("/{identifier:path}/unload")
async def unload_model(
    identifier: str,
    ctx: ServerContext = Depends(get_context),
) -> JSONResponse:
    """Unload a model instance."""
    return envelope_response(await tools.unload_model(ctx, UnloadModelInput(identifier=identifier)))


@router.get("/{identifier:path}")
async def get_model_info(
    identifier: str,
    ctx: ServerContext = Depends(get_context),
) -> JSONResponse:
    """Get information about a loaded model instance."""
    return envelope_response(await tools.get_model_info(ctx, GetModelInfoInput(identifier=identifier)))
