"""Pydantic models for message history and audit endpoints."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from toolchat_server.models.chat import MessageResponse


class MessagesResponse(BaseModel):
    """A page of messages, newest first."""

    messages: list[MessageResponse] = Field(default_factory=list)
    total: int = Field(description="Total number of messages for the user")
    limit: int
    offset: int


class ClearMessagesResponse(BaseModel):
    """Response for DELETE /api/v1/messages."""

    message: str
    deleted_count: int


class ToolInvocationResponse(BaseModel):
    """One tool invocation audit record."""

    id: int
    message_id: int
    tool_id: int
    input: dict[str, Any] = Field(default_factory=dict)
    output: Any = None
    status: str = Field(description="success, error or pending")
    error_message: str | None = None
    invoked_at: str
    completed_at: str

    model_config = ConfigDict(from_attributes=True)


class ToolInvocationsResponse(BaseModel):
    """Tool invocations triggered by one message."""

    message_id: int
    invocations: list[ToolInvocationResponse] = Field(default_factory=list)
