"""Cache of reusable tool-schema bundles."""

import logging
from collections.abc import Callable
from datetime import datetime, timedelta
from uuid import uuid4

from .models import ToolSchema, ToolSet, utcnow

logger = logging.getLogger(__name__)


class ToolSetCache:
    """
    In-memory tool sets with sliding TTL expiry.

    - Caller-supplied ids overwrite any existing entry
    - Reads refresh the access time
    - Expired entries vanish on read, or on the owner's next sweep
    """

    def __init__(self, ttl: timedelta, clock: Callable[[], datetime] = utcnow):
        self.ttl = ttl
        self._clock = clock
        self._tool_sets: dict[str, ToolSet] = {}

    def _is_expired(self, tool_set: ToolSet, now: datetime) -> bool:
        return now - tool_set.last_accessed_at > self.ttl

    def register(self, tools: list[ToolSchema], tool_set_id: str | None = None) -> ToolSet:
        """Store ``tools`` under ``tool_set_id`` (generated when omitted)."""
        now = self._clock()
        tool_set = ToolSet(
            id=tool_set_id or str(uuid4()),
            tools=list(tools),
            created_at=now,
            last_accessed_at=now,
        )
        replaced = tool_set.id in self._tool_sets
        self._tool_sets[tool_set.id] = tool_set
        logger.info(
            "%s tool set %s (%d tools)",
            "Replaced" if replaced else "Registered",
            tool_set.id,
            len(tool_set.tools),
        )
        return tool_set

    def get(self, tool_set_id: str) -> ToolSet | None:
        """Live tool set by id, refreshing its access time."""
        tool_set = self._tool_sets.get(tool_set_id)
        if tool_set is None:
            return None

        now = self._clock()
        if self._is_expired(tool_set, now):
            del self._tool_sets[tool_set_id]
            logger.debug("Tool set %s expired", tool_set_id)
            return None

        tool_set.last_accessed_at = now
        return tool_set

    def delete(self, tool_set_id: str) -> bool:
        return self._tool_sets.pop(tool_set_id, None) is not None

    def list_ids(self) -> list[str]:
        return list(self._tool_sets)

    def count(self) -> int:
        return len(self._tool_sets)

    def cleanup_expired(self) -> int:
        """Remove every expired tool set. Returns count removed."""
        now = self._clock()
        expired = [
            tid for tid, tool_set in self._tool_sets.items()
            if self._is_expired(tool_set, now)
        ]
        for tid in expired:
            del self._tool_sets[tid]
        return len(expired)

    def clear(self) -> None:
        self._tool_sets.clear()
