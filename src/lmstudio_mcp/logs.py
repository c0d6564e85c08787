"""Logging setup.

stdout carries the stdio protocol stream, so every record goes to stderr.
"""

import logging
import sys

from lmstudio_mcp.config import get_settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"

_LOGGING_CONFIGURED = False


def setup_logging(level: str | None = None) -> None:
    """Configure the root logger once.

    Args:
        level: Level name overriding ``LOG_LEVEL`` (e.g. "DEBUG").
    """
    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return

    level_name = (level or get_settings().log_level).upper()
    level_value = getattr(logging, level_name, None)
    if not isinstance(level_value, int):
        level_value = logging.INFO

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root_logger = logging.getLogger()
    root_logger.setLevel(level_value)
    root_logger.addHandler(handler)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(level_value, logging.WARNING))

    _LOGGING_CONFIGURED = True
