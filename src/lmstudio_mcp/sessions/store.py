"""In-memory session store with sliding TTL expiry."""

import logging
from collections.abc import Callable
from datetime import datetime, timedelta
from uuid import uuid4

from .models import ChatMessage, Role, Session, SessionInfo, ToolSchema, ToolSet, utcnow
from .tool_sets import ToolSetCache

logger = logging.getLogger(__name__)

SESSION_TTL = timedelta(minutes=30)
CLEANUP_INTERVAL = timedelta(minutes=5)


class SessionStore:
    """
    Owns every session and tool-set record of the process.

    - Sliding expiry: a record is visible while now - last access <= TTL
    - Every successful read or write refreshes the access time
    - No background timer: create/get/list/count sweep both maps when
      more than CLEANUP_INTERVAL has passed since the last sweep
    - Never raises; absence is signalled by None or False

    Operations are synchronous, so on a single event loop no other task
    can observe a half-applied mutation.
    """

    def __init__(
        self,
        ttl: timedelta = SESSION_TTL,
        cleanup_interval: timedelta = CLEANUP_INTERVAL,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.ttl = ttl
        self.cleanup_interval = cleanup_interval
        self._clock = clock
        self._sessions: dict[str, Session] = {}
        self.tool_sets = ToolSetCache(ttl, clock)
        self._last_cleanup = clock()

    def _is_expired(self, session: Session, now: datetime) -> bool:
        return now - session.last_accessed_at > self.ttl

    def _maybe_cleanup(self) -> None:
        """Sweep expired records if the cleanup interval has elapsed."""
        if self._clock() - self._last_cleanup > self.cleanup_interval:
            self.cleanup_expired_sessions()
            self._last_cleanup = self._clock()

    # --- Sessions ---

    def create_session(
        self,
        model_id: str,
        tools: list[ToolSchema],
        system_prompt: str | None = None,
    ) -> Session:
        """Create a session, seeded with a system message when a prompt is given."""
        self._maybe_cleanup()

        now = self._clock()
        session = Session(
            id=str(uuid4()),
            model_id=model_id,
            tools=list(tools),
            created_at=now,
            last_accessed_at=now,
        )
        if system_prompt:
            session.messages.append(ChatMessage(role=Role.SYSTEM, content=system_prompt))

        self._sessions[session.id] = session
        logger.debug("Created session %s for model %s", session.id, model_id)
        return session

    def get_session(self, session_id: str) -> Session | None:
        """
        Get a live session by ID.

        Returns None if the session doesn't exist or has expired; an
        expired record is deleted on the way out.
        """
        self._maybe_cleanup()

        session = self._sessions.get(session_id)
        if session is None:
            return None

        now = self._clock()
        if self._is_expired(session, now):
            del self._sessions[session_id]
            logger.debug("Session %s expired", session_id)
            return None

        session.last_accessed_at = now
        return session

    def get_session_info(self, session_id: str) -> SessionInfo | None:
        """Summary of a live session, without its message log."""
        session = self.get_session(session_id)
        if session is None:
            return None

        remaining = self.ttl - (self._clock() - session.last_accessed_at)
        return SessionInfo(
            session_id=session.id,
            model_id=session.model_id,
            message_count=len(session.messages),
            tool_count=len(session.tools),
            created_at=session.created_at,
            last_accessed_at=session.last_accessed_at,
            ttl_remaining_ms=int(remaining.total_seconds() * 1000),
        )

    def append_message(self, session_id: str, message: ChatMessage) -> bool:
        """Append to a live session's log. False (and no change) otherwise."""
        session = self.get_session(session_id)
        if session is None:
            return False

        session.messages.append(message)
        session.last_accessed_at = self._clock()
        return True

    def delete_session(self, session_id: str) -> bool:
        """Remove a session whether or not it has expired."""
        deleted = self._sessions.pop(session_id, None) is not None
        if deleted:
            logger.debug("Deleted session %s", session_id)
        return deleted

    def list_sessions(self) -> list[str]:
        """IDs of stored sessions; may include expired ones until the next sweep."""
        self._maybe_cleanup()
        return list(self._sessions)

    def get_session_count(self) -> int:
        self._maybe_cleanup()
        return len(self._sessions)

    def cleanup_expired_sessions(self) -> int:
        """Remove expired sessions and tool sets. Returns total removed."""
        now = self._clock()
        expired = [
            sid for sid, session in self._sessions.items()
            if self._is_expired(session, now)
        ]
        for sid in expired:
            del self._sessions[sid]

        cleaned = len(expired) + self.tool_sets.cleanup_expired()
        if cleaned:
            logger.info("Cleaned up %d expired record(s)", cleaned)
        return cleaned

    def get_session_ttl(self) -> timedelta:
        return self.ttl

    def clear(self) -> None:
        """Drop every session and tool set (test harnesses only)."""
        self._sessions.clear()
        self.tool_sets.clear()
        self._last_cleanup = self._clock()

    # --- Tool sets ---

    def register_tool_set(self, tools: list[ToolSchema], tool_set_id: str | None = None) -> ToolSet:
        self._maybe_cleanup()
        return self.tool_sets.register(tools, tool_set_id)

    def get_tool_set(self, tool_set_id: str) -> ToolSet | None:
        self._maybe_cleanup()
        return self.tool_sets.get(tool_set_id)

    def delete_tool_set(self, tool_set_id: str) -> bool:
        return self.tool_sets.delete(tool_set_id)

    def list_tool_sets(self) -> list[str]:
        self._maybe_cleanup()
        return self.tool_sets.list_ids()

    def get_tool_set_count(self) -> int:
        self._maybe_cleanup()
        return self.tool_sets.count()
