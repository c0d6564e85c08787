"""Test doubles for the clock and the model backend."""

import asyncio
from datetime import datetime, timedelta
from typing import Any

from lmstudio_mcp.backend.base import (
    DownloadedModel,
    HealthCheck,
    LoadedModel,
    LoadedModelHandle,
    ModelInfo,
    RespondResult,
)
from lmstudio_mcp.results import ModelNotFoundError
from lmstudio_mcp.sessions.models import ChatMessage


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, start: datetime = datetime(2025, 1, 1, 12, 0, 0)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


def model_info(identifier: str = "test-model") -> ModelInfo:
    return ModelInfo(
        identifier=identifier,
        model_key="llama-3.2-3b",
        path=f"lmstudio-community/{identifier}",
        display_name="Llama 3.2 3B",
        size_bytes=2_000_000_000,
        context_length=4096,
    )


class FakeBackend:
    """
    Scripted in-memory backend.

    - ``responses`` are consumed in order by respond()
    - ``*_error`` attributes make the matching call raise
    - every respond() call is recorded with a copy of its messages
    """

    base_url = "http://lmstudio.test:1234"

    def __init__(self) -> None:
        self.loaded: dict[str, ModelInfo] = {"test-model": model_info()}
        self.downloaded: list[DownloadedModel] = [
            DownloadedModel(
                model_key="llama-3.2-3b",
                path="lmstudio-community/llama-3.2-3b",
                display_name="Llama 3.2 3B",
                size_bytes=2_000_000_000,
                architecture="llama",
                quantization="Q4_K_M",
            )
        ]
        self.responses: list[str] = []
        self.respond_calls: list[dict[str, Any]] = []
        self.respond_delay: float = 0
        self.model_info_error: Exception | None = None
        self.respond_error: Exception | None = None
        self.list_error: Exception | None = None
        self.load_error: Exception | None = None
        self.unload_error: Exception | None = None
        self.connected = True
        self.closed = False

    async def list_downloaded_models(self) -> list[DownloadedModel]:
        if self.list_error:
            raise self.list_error
        return list(self.downloaded)

    async def list_loaded_models(self) -> list[LoadedModel]:
        if self.list_error:
            raise self.list_error
        return [
            LoadedModel(
                identifier=info.identifier,
                model_key=info.model_key,
                path=info.path,
                display_name=info.display_name,
                size_bytes=info.size_bytes,
                trained_for_tool_use=True,
            )
            for info in self.loaded.values()
        ]

    async def load(self, model_key: str, options: dict[str, Any] | None = None) -> LoadedModelHandle:
        if self.load_error:
            raise self.load_error
        identifier = (options or {}).get("identifier") or model_key
        self.loaded[identifier] = model_info(identifier)
        return LoadedModelHandle(identifier=identifier, model_key=model_key, path=f"models/{model_key}")

    async def unload(self, identifier: str) -> None:
        if self.unload_error:
            raise self.unload_error
        if identifier not in self.loaded:
            raise ModelNotFoundError(f"No loaded model with identifier '{identifier}' (not found)")
        del self.loaded[identifier]

    async def get_model_info(self, identifier: str) -> ModelInfo | None:
        if self.model_info_error:
            raise self.model_info_error
        return self.loaded.get(identifier)

    async def respond(self, identifier: str, messages: list[ChatMessage], max_tokens: int) -> RespondResult:
        self.respond_calls.append(
            {"identifier": identifier, "messages": list(messages), "max_tokens": max_tokens}
        )
        if self.respond_delay:
            await asyncio.sleep(self.respond_delay)
        if self.respond_error:
            raise self.respond_error
        return RespondResult(content=self.responses.pop(0))

    async def test_connection(self) -> HealthCheck:
        if self.connected:
            return HealthCheck(connected=True, base_url=self.base_url)
        return HealthCheck(connected=False, base_url=self.base_url, error="ECONNREFUSED")

    async def aclose(self) -> None:
        self.closed = True
