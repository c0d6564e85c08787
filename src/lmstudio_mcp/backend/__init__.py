"""Model-serving backend."""

from .base import (
    DownloadedModel,
    HealthCheck,
    LoadedModel,
    LoadedModelHandle,
    ModelBackend,
    ModelInfo,
    RespondResult,
)
from .lmstudio import LMStudioClient, get_client, reset_client

__all__ = [
    "DownloadedModel",
    "HealthCheck",
    "LoadedModel",
    "LoadedModelHandle",
    "ModelBackend",
    "ModelInfo",
    "RespondResult",
    "LMStudioClient",
    "get_client",
    "reset_client",
]
