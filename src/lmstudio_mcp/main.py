"""LM Studio MCP server entry point."""

import argparse
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from lmstudio_mcp import __version__
from lmstudio_mcp.api import router
from lmstudio_mcp.context import ServerContext, create_context
from lmstudio_mcp.logs import setup_logging
from lmstudio_mcp.results import ErrorCode, error_result
from lmstudio_mcp.server import create_mcp_server
from lmstudio_mcp.tools import format_validation_error

logger = logging.getLogger(__name__)

# .env next to the project root, then the working directory
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(env_path)
load_dotenv()


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    context: ServerContext | None = getattr(app.state, "context", None)
    if context is not None:
        await context.aclose()


def create_app(context: ServerContext | None = None) -> FastAPI:
    """HTTP API exposing the same tools as the MCP server."""
    app = FastAPI(title="LM Studio MCP", version=__version__, lifespan=lifespan)
    app.state.context = context

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        result = error_result(
            "Invalid input parameters", ErrorCode.INVALID_INPUT, format_validation_error(exc)
        )
        return JSONResponse(status_code=400, content=result.to_payload())

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unexpected error handling %s %s", request.method, request.url.path)
        result = error_result("An unexpected error occurred", ErrorCode.UNKNOWN, str(exc) or "Unknown error")
        return JSONResponse(status_code=500, content=result.to_payload())

    app.include_router(router)
    return app


app = create_app()


def run_stdio(context: ServerContext) -> None:
    create_mcp_server(context).run(transport="stdio")


def run_http(context: ServerContext, host: str, port: int) -> None:
    import uvicorn

    uvicorn.run(create_app(context), host=host, port=port, log_config=None)


def cli() -> None:
    parser = argparse.ArgumentParser(description="MCP server for LM Studio model management")
    parser.add_argument(
        "--transport",
        choices=["stdio", "http"],
        default="stdio",
        help="stdio for MCP clients (default), http for the REST API",
    )
    parser.add_argument("--host", default="127.0.0.1", help="HTTP listen host")
    parser.add_argument("--port", type=int, default=8000, help="HTTP listen port")
    args = parser.parse_args()

    setup_logging()
    context = create_context()
    logger.info("Starting lmstudio-mcp %s (%s transport)", __version__, args.transport)

    try:
        if args.transport == "http":
            run_http(context, args.host, args.port)
        else:
            run_stdio(context)
    except KeyboardInterrupt:
        pass
    except Exception as e:
        logger.error("Failed to start MCP Server: %s", e)
        raise SystemExit(1) from e


if __name__ == "__main__":
    cli()
