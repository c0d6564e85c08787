"""Agentic continuation engine behind the act tool."""

import asyncio
import logging

from lmstudio_mcp.backend.base import ModelBackend
from lmstudio_mcp.results import (
    ErrorCode,
    ToolResult,
    error_result,
    error_text,
    map_error_code,
    success_result,
    with_timeout,
)
from lmstudio_mcp.sessions.models import ChatMessage, Role, Session, ToolSchema
from lmstudio_mcp.sessions.store import SessionStore

from .models import DEFAULT_MAX_TOKENS, ActData, ActInput, ResponseStats, ToolResultInput
from .parser import parse_tool_calls
from .prompts import build_tool_system_prompt, format_tool_results

logger = logging.getLogger(__name__)


class ActEngine:
    """
    Runs one turn of a server-side agentic session.

    - New task: identifier + task (+ optional tools / tool set) creates a session
    - Resume: session id (+ optional tool results) continues one
    - Each turn calls the backend once and returns the session id instead
      of the transcript; the final text is read separately
    - A brand-new session whose first turn fails is deleted

    Concurrent turns on the same session are not serialized: their
    appends interleave in completion order.
    """

    def __init__(
        self,
        store: SessionStore,
        backend: ModelBackend,
        default_max_tokens: int = DEFAULT_MAX_TOKENS,
        respond_timeout: float | None = None,
    ):
        self.store = store
        self.backend = backend
        self.default_max_tokens = default_max_tokens
        self.respond_timeout = respond_timeout

    def _start_session(self, data: ActInput) -> Session | ToolResult:
        """Create a session for a new task, or return the validation error."""
        if not data.identifier:
            return error_result(
                "Model identifier required for new session",
                ErrorCode.INVALID_INPUT,
                "Provide 'identifier' when starting a new session",
            )
        if not data.task:
            return error_result(
                "Task required for new session",
                ErrorCode.INVALID_INPUT,
                "Provide 'task' when starting a new session",
            )

        tools: list[ToolSchema] = []
        if data.tool_set_id:
            tool_set = self.store.get_tool_set(data.tool_set_id)
            if tool_set is None:
                return error_result(
                    "Tool set not found or expired",
                    ErrorCode.INVALID_INPUT,
                    f"Tool set '{data.tool_set_id}' does not exist or has expired",
                )
            tools.extend(tool_set.tools)
        tools.extend(data.tools or [])

        system_prompt = build_tool_system_prompt(tools) if tools else None
        session = self.store.create_session(data.identifier, tools, system_prompt)
        self.store.append_message(session.id, ChatMessage(role=Role.USER, content=data.task))
        return session

    def _resume_session(self, data: ActInput) -> Session | ToolResult:
        """Look up a live session and feed it the caller's tool results."""
        session = self.store.get_session(data.session_id)
        if session is None:
            return error_result(
                "Session not found or expired",
                ErrorCode.INVALID_INPUT,
                f"Session '{data.session_id}' does not exist or has expired",
            )

        if data.tool_results:
            self._log_unrequested_results(session, data.tool_results)
            self.store.append_message(
                session.id,
                ChatMessage(role=Role.USER, content=format_tool_results(data.tool_results)),
            )
        return session

    @staticmethod
    def _log_unrequested_results(session: Session, tool_results: list[ToolResultInput]) -> None:
        # Results are not paired with requested calls; mismatches are only logged.
        last = session.last_response
        requested = {tc.name for tc in (parse_tool_calls(last) or [])} if last else set()
        unrequested = [r.name for r in tool_results if r.name not in requested]
        if unrequested:
            logger.debug(
                "Session %s received results for tools not requested last turn: %s",
                session.id,
                ", ".join(unrequested),
            )

    async def act(self, data: ActInput) -> ToolResult:
        """Run one turn and report either tool calls or completion."""
        if data.session_id:
            outcome = self._resume_session(data)
            is_new_session = False
        else:
            outcome = self._start_session(data)
            is_new_session = True

        if isinstance(outcome, ToolResult):
            return outcome
        session = outcome

        try:
            model_info = await self.backend.get_model_info(session.model_id)
            if model_info is None:
                if is_new_session:
                    self.store.delete_session(session.id)
                return error_result(
                    f"Model '{session.model_id}' not found or not loaded",
                    ErrorCode.MODEL_NOT_LOADED,
                    "Model not loaded",
                )

            respond = self.backend.respond(
                session.model_id,
                list(session.messages),
                data.max_tokens or self.default_max_tokens,
            )
            if self.respond_timeout is not None:
                result = await with_timeout(respond, self.respond_timeout, "Model response")
            else:
                result = await respond
        except asyncio.CancelledError:
            if is_new_session:
                self.store.delete_session(session.id)
            raise
        except Exception as e:
            if is_new_session:
                self.store.delete_session(session.id)
            code = map_error_code(e)
            logger.warning("act failed for session %s: %s (%s)", session.id, e, code.value)
            return error_result("Failed to run task", code, error_text(e))

        response_text = result.content.strip()

        # Recorded whatever the outcome, so the log matches what the model said
        if not self.store.append_message(
            session.id, ChatMessage(role=Role.ASSISTANT, content=response_text)
        ):
            logger.debug("Session %s vanished before its response was stored", session.id)

        stats = ResponseStats(
            message_count=len(session.messages),
            response_length=len(response_text),
        )
        tool_calls = parse_tool_calls(response_text)

        if tool_calls:
            return success_result(
                "Model requested tool calls",
                ActData(session_id=session.id, done=False, tool_calls=tool_calls, stats=stats),
            )

        # Session kept so the caller can read the final response
        return success_result(
            "Task completed",
            ActData(session_id=session.id, done=True, stats=stats),
        )
