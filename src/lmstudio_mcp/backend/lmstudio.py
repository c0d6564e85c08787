"""LM Studio REST client."""

import logging
from typing import Any

import httpx

from lmstudio_mcp.config import get_settings
from lmstudio_mcp.results import (
    BackendConnectionError,
    BackendError,
    BackendTimeoutError,
    ModelNotFoundError,
)
from lmstudio_mcp.sessions.models import ChatMessage

from .base import (
    DownloadedModel,
    HealthCheck,
    LoadedModel,
    LoadedModelHandle,
    ModelInfo,
    RespondResult,
)

logger = logging.getLogger(__name__)

MODELS_PATH = "/api/v0/models"
CHAT_COMPLETIONS_PATH = "/api/v0/chat/completions"
LOAD_PATH = "/api/v1/models/load"
UNLOAD_PATH = "/api/v1/models/unload"

LLM_TYPES = {"llm", "vlm"}


def _error_detail(response: httpx.Response) -> str:
    """Pull the backend's error text out of a failed response."""
    try:
        body = response.json()
    except ValueError:
        return response.text.strip() or response.reason_phrase
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict):
            return str(error.get("message") or error)
        if error:
            return str(error)
        if body.get("message"):
            return str(body["message"])
    return str(body)


def _capabilities(entry: dict[str, Any]) -> list[str]:
    caps = entry.get("capabilities") or []
    return [str(c) for c in caps] if isinstance(caps, list) else []


class LMStudioClient:
    """
    Async client for the LM Studio server.

    The HTTP connection pool is created on first use and released by
    ``aclose()``. Transport failures surface as BackendConnectionError,
    unknown models as ModelNotFoundError, other HTTP errors as BackendError.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        respond_timeout: float = 300.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.respond_timeout = respond_timeout
        self._transport = transport
        self._http: httpx.AsyncClient | None = None

    def _get_http(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._http is None:
            self._http = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                follow_redirects=True,
                transport=self._transport,
            )
        return self._http

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json_body: dict[str, Any] | None = None,
        timeout: float | None = None,
        not_found_message: str | None = None,
    ) -> Any:
        http = self._get_http()
        kwargs: dict[str, Any] = {}
        if json_body is not None:
            kwargs["json"] = json_body
        if timeout is not None:
            kwargs["timeout"] = timeout

        try:
            response = await http.request(method, path, **kwargs)
        except httpx.ConnectTimeout as e:
            raise BackendConnectionError(
                f"Failed to connect to LM Studio at {self.base_url}: connection timed out"
            ) from e
        except httpx.TimeoutException as e:
            raise BackendTimeoutError(f"{method} {path} timed out") from e
        except httpx.TransportError as e:
            raise BackendConnectionError(
                f"Failed to connect to LM Studio at {self.base_url}: {e}"
            ) from e

        if response.status_code == 404:
            raise ModelNotFoundError(not_found_message or f"{path} not found")
        if response.is_error:
            raise BackendError(
                f"LM Studio returned {response.status_code}: {_error_detail(response)}"
            )
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise BackendError(f"LM Studio returned invalid JSON for {path}") from e

    async def _list_entries(self) -> list[dict[str, Any]]:
        body = await self._request("GET", MODELS_PATH)
        entries = body.get("data", []) if isinstance(body, dict) else []
        return [e for e in entries if isinstance(e, dict)]

    async def list_downloaded_models(self) -> list[DownloadedModel]:
        entries = await self._list_entries()
        return [
            DownloadedModel(
                model_key=e["id"],
                path=e.get("path"),
                display_name=e.get("display_name") or e["id"],
                size_bytes=e.get("size_bytes"),
                architecture=e.get("arch"),
                quantization=e.get("quantization"),
            )
            for e in entries
            if e.get("type", "llm") in LLM_TYPES
        ]

    async def list_loaded_models(self) -> list[LoadedModel]:
        entries = await self._list_entries()
        return [
            LoadedModel(
                identifier=e["id"],
                model_key=e.get("model_key") or e["id"],
                path=e.get("path"),
                display_name=e.get("display_name") or e["id"],
                size_bytes=e.get("size_bytes"),
                vision=e.get("type") == "vlm",
                trained_for_tool_use="tool_use" in _capabilities(e),
            )
            for e in entries
            if e.get("type", "llm") in LLM_TYPES and e.get("state") == "loaded"
        ]

    async def load(self, model_key: str, options: dict[str, Any] | None = None) -> LoadedModelHandle:
        """Load ``model_key``.

        Args:
            model_key: Key of a downloaded model.
            options: Optional ``identifier``, ``context_length``, ``eval_batch_size``.
        """
        options = options or {}
        body: dict[str, Any] = {"model": model_key}
        if options.get("identifier"):
            body["instance_id"] = options["identifier"]
        if options.get("context_length") is not None:
            body["context_length"] = options["context_length"]
        if options.get("eval_batch_size") is not None:
            body["eval_batch_size"] = options["eval_batch_size"]

        data = await self._request(
            "POST",
            LOAD_PATH,
            json_body=body,
            timeout=self.respond_timeout,
            not_found_message=f"Model '{model_key}' not found",
        )
        data = data if isinstance(data, dict) else {}
        identifier = (
            data.get("instance_id")
            or data.get("identifier")
            or options.get("identifier")
            or model_key
        )
        logger.info("Loaded model %s as %s", model_key, identifier)
        return LoadedModelHandle(
            identifier=identifier,
            model_key=data.get("model_key") or model_key,
            path=data.get("path"),
        )

    async def unload(self, identifier: str) -> None:
        await self._request(
            "POST",
            UNLOAD_PATH,
            json_body={"instance_id": identifier},
            not_found_message=f"No loaded model with identifier '{identifier}' (not found)",
        )
        logger.info("Unloaded model %s", identifier)

    async def get_model_info(self, identifier: str) -> ModelInfo | None:
        """Info for a loaded model; None when unknown or not loaded."""
        try:
            entry = await self._request("GET", f"{MODELS_PATH}/{identifier}")
        except ModelNotFoundError:
            return None
        if not isinstance(entry, dict) or entry.get("state") != "loaded":
            return None
        return ModelInfo(
            identifier=entry.get("id") or identifier,
            model_key=entry.get("model_key") or entry.get("id") or identifier,
            path=entry.get("path"),
            display_name=entry.get("display_name") or entry.get("id") or identifier,
            size_bytes=entry.get("size_bytes"),
            context_length=entry.get("loaded_context_length") or entry.get("max_context_length"),
        )

    async def respond(self, identifier: str, messages: list[ChatMessage], max_tokens: int) -> RespondResult:
        """Generate one reply to the full message log."""
        body = {
            "model": identifier,
            "messages": [{"role": m.role.value, "content": m.content} for m in messages],
            "max_tokens": max_tokens,
            "stream": False,
        }
        data = await self._request(
            "POST",
            CHAT_COMPLETIONS_PATH,
            json_body=body,
            timeout=self.respond_timeout,
            not_found_message=f"Model '{identifier}' not found",
        )
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise BackendError("LM Studio returned a completion without content") from e
        return RespondResult(content=content or "")

    async def test_connection(self) -> HealthCheck:
        try:
            await self._list_entries()
        except BackendError as e:
            return HealthCheck(connected=False, base_url=self.base_url, error=str(e) or "Connection failed")
        return HealthCheck(connected=True, base_url=self.base_url)

    async def aclose(self) -> None:
        """Close the HTTP client."""
        if self._http is not None:
            await self._http.aclose()
            self._http = None


_client: LMStudioClient | None = None


def get_client() -> LMStudioClient:
    """Process-wide client, configured from the environment on first call."""
    global _client
    if _client is None:
        settings = get_settings()
        _client = LMStudioClient(
            settings.base_url,
            timeout=settings.timeout,
            respond_timeout=settings.respond_timeout,
        )
    return _client


def reset_client() -> None:
    """Forget the process-wide client so the next call reconnects."""
    global _client
    _client = None
