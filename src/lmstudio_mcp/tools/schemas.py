"""Tool inputs and outputs."""

from pydantic import Field

from lmstudio_mcp.schema import CamelModel
from lmstudio_mcp.sessions.models import ChatMessage, ToolSchema


# --- Model management ---


class LoadModelInput(CamelModel):
    model: str = Field(min_length=1, description="The model key to load (e.g., 'llama-3.2-3b-instruct')")
    identifier: str | None = Field(default=None, description="Custom identifier for the loaded model instance")
    context_length: int | None = Field(default=None, ge=1, description="Context window size in tokens")
    eval_batch_size: int | None = Field(
        default=None, ge=1, description="Number of tokens to process together in a batch"
    )


class UnloadModelInput(CamelModel):
    identifier: str = Field(min_length=1, description="The model instance identifier to unload")


class GetModelInfoInput(CamelModel):
    identifier: str = Field(min_length=1, description="The model instance identifier to get information about")


class HealthCheckData(CamelModel):
    connected: bool
    base_url: str


# --- Sessions ---


class GetSessionInput(CamelModel):
    session_id: str = Field(min_length=1, description="The session ID to retrieve")
    include_messages: bool = Field(default=False, description="Include full message history (default: false)")
    delete_after_read: bool = Field(default=False, description="Delete session after reading (default: false)")


class GetSessionData(CamelModel):
    session_id: str
    model_id: str
    message_count: int
    last_response: str | None = None
    messages: list[ChatMessage] | None = None


class DeleteSessionInput(CamelModel):
    session_id: str = Field(min_length=1, description="The session ID to delete")


class DeleteSessionData(CamelModel):
    session_id: str
    deleted: bool


class SessionListData(CamelModel):
    session_ids: list[str]
    count: int


# --- Tool sets ---


class RegisterToolsInput(CamelModel):
    tools: list[ToolSchema] = Field(min_length=1, description="Tool schemas to register")
    tool_set_id: str | None = Field(
        default=None, description="Custom ID for the tool set (auto-generated if omitted)"
    )


class RegisterToolsData(CamelModel):
    tool_set_id: str
    tool_count: int
    tool_names: list[str]
