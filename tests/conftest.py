"""
Test fixtures for LM Studio MCP tests.
"""

import os

import pytest
from httpx import ASGITransport, AsyncClient

# Keep tests away from any real LM Studio instance
os.environ["LMSTUDIO_BASE_URL"] = "http://lmstudio.test:1234"

from lmstudio_mcp.api.deps import get_context
from lmstudio_mcp.context import create_context
from lmstudio_mcp.main import app
from lmstudio_mcp.sessions.store import SessionStore

from fakes import FakeBackend, FakeClock


@pytest.fixture
def clock():
    """Manually advanced clock shared by the store."""
    return FakeClock()


@pytest.fixture
def store(clock):
    """Empty session store on the fake clock."""
    return SessionStore(clock=clock)


@pytest.fixture
def backend():
    """Scripted model backend."""
    return FakeBackend()


@pytest.fixture
def ctx(store, backend):
    """Server context wired to the fake backend."""
    return create_context(store=store, backend=backend)


@pytest.fixture
async def client(ctx):
    """Async HTTP client for testing the FastAPI app."""
    app.dependency_overrides[get_context] = lambda: ctx
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
