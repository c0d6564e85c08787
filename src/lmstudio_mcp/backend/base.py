"""Model-serving backend contract and its descriptors."""

from typing import Any, Protocol

from lmstudio_mcp.schema import CamelModel
from lmstudio_mcp.sessions.models import ChatMessage


class DownloadedModel(CamelModel):
    model_key: str
    path: str | None = None
    display_name: str
    size_bytes: int | None = None
    architecture: str | None = None
    quantization: str | None = None


class LoadedModel(CamelModel):
    identifier: str
    model_key: str
    path: str | None = None
    display_name: str
    size_bytes: int | None = None
    vision: bool = False
    trained_for_tool_use: bool = False


class ModelInfo(CamelModel):
    identifier: str
    model_key: str
    path: str | None = None
    display_name: str
    size_bytes: int | None = None
    context_length: int | None = None


class LoadedModelHandle(CamelModel):
    identifier: str
    model_key: str
    path: str | None = None


class RespondResult(CamelModel):
    content: str


class HealthCheck(CamelModel):
    connected: bool
    base_url: str
    error: str | None = None


class ModelBackend(Protocol):
    """What the tools need from a model server.

    The act engine only uses ``get_model_info`` and ``respond``.
    """

    base_url: str

    async def list_downloaded_models(self) -> list[DownloadedModel]: ...

    async def list_loaded_models(self) -> list[LoadedModel]: ...

    async def load(self, model_key: str, options: dict[str, Any] | None = None) -> LoadedModelHandle: ...

    async def unload(self, identifier: str) -> None: ...

    async def get_model_info(self, identifier: str) -> ModelInfo | None: ...

    async def respond(self, identifier: str, messages: list[ChatMessage], max_tokens: int) -> RespondResult: ...

    async def test_connection(self) -> HealthCheck: ...

    async def aclose(self) -> None: ...
