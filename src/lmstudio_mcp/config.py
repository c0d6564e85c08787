"""Runtime configuration read from the environment.

Values are resolved when requested rather than at import time, so a
``.env`` loaded by the entry point (or a test monkeypatching
``os.environ``) is always honoured.
"""

import os
from dataclasses import dataclass

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = "1234"
DEFAULT_TIMEOUT = 30.0  # seconds
DEFAULT_RESPOND_TIMEOUT = 300.0  # seconds


@dataclass(frozen=True)
class Settings:
    """Snapshot of the environment-derived settings."""

    base_url: str
    timeout: float
    respond_timeout: float
    log_level: str


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def get_base_url() -> str:
    """Base URL of the LM Studio server.

    ``LMSTUDIO_BASE_URL`` wins; otherwise it is built from
    ``LMSTUDIO_HOST`` and ``LMSTUDIO_PORT``.
    """
    base_url = os.getenv("LMSTUDIO_BASE_URL")
    if base_url:
        return base_url.rstrip("/")
    host = os.getenv("LMSTUDIO_HOST") or DEFAULT_HOST
    port = os.getenv("LMSTUDIO_PORT") or DEFAULT_PORT
    return f"http://{host}:{port}"


def get_settings() -> Settings:
    return Settings(
        base_url=get_base_url(),
        timeout=_float_env("LMSTUDIO_TIMEOUT", DEFAULT_TIMEOUT),
        respond_timeout=_float_env("LMSTUDIO_RESPOND_TIMEOUT", DEFAULT_RESPOND_TIMEOUT),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )
