"""Wiring of store, backend and engine shared by both transports."""

from dataclasses import dataclass

from lmstudio_mcp.agent.engine import ActEngine
from lmstudio_mcp.backend.base import ModelBackend
from lmstudio_mcp.backend.lmstudio import get_client
from lmstudio_mcp.config import get_settings
from lmstudio_mcp.sessions.store import SessionStore


@dataclass
class ServerContext:
    """Everything a tool handler may touch during one call."""

    store: SessionStore
    backend: ModelBackend
    engine: ActEngine

    async def aclose(self) -> None:
        await self.backend.aclose()


def create_context(
    store: SessionStore | None = None,
    backend: ModelBackend | None = None,
    respond_timeout: float | None = None,
) -> ServerContext:
    """Build a context; omitted parts come from the environment."""
    if store is None:
        store = SessionStore()
    if backend is None:
        backend = get_client()
        if respond_timeout is None:
            respond_timeout = get_settings().respond_timeout
    return ServerContext(
        store=store,
        backend=backend,
        engine=ActEngine(store, backend, respond_timeout=respond_timeout),
    )
