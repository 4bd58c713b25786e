"""Pydantic models for chat API requests and responses.

This module defines the request and response schemas for sending a message
and receiving the persisted exchange.
"""

from pydantic import BaseModel, ConfigDict, Field


class SendMessageRequest(BaseModel):
    """Request body for POST /api/v1/chat."""

    text: str = Field(
        ...,
        min_length=1,
        max_length=5000,
        description="The user message to send.",
    )

    model_config = ConfigDict(
        json_schema_extra={"examples": [{"text": "Look up order #42"}]}
    )


class MessageResponse(BaseModel):
    """A persisted chat message."""

    id: int = Field(description="Unique message identifier")
    owner: str = Field(description="User the message belongs to")
    timestamp: str = Field(description="ISO 8601 timestamp")
    own: bool = Field(description="True if the user wrote this message")
    text: str = Field(description="Message text")

    model_config = ConfigDict(from_attributes=True)


class SendMessageResponse(BaseModel):
    """Response body for POST /api/v1/chat.

    ``tools_used`` is left out of the JSON entirely when no tool ran.
    """

    user_message: MessageResponse = Field(description="The saved user message")
    bot_message: MessageResponse = Field(description="The saved model reply")
    tools_used: list[str] | None = Field(
        default=None,
        description="Names of the tools invoked while answering (omitted if none)",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "user_message": {
                    "id": 1,
                    "owner": "alice",
                    "timestamp": "2025-01-15T10:35:00.000000Z",
                    "own": True,
                    "text": "Look up order #42",
                },
                "bot_message": {
                    "id": 2,
                    "owner": "alice",
                    "timestamp": "2025-01-15T10:35:02.000000Z",
                    "own": False,
                    "text": "Order #42 has shipped.",
                },
                "tools_used": ["lookup_order"],
            }
        }
    )
