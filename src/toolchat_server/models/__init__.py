"""Pydantic models for API request and response schemas.

This package contains all Pydantic models used for validating and
serializing API requests and responses across all endpoints.
"""

from toolchat_server.models.chat import (
    MessageResponse,
    SendMessageRequest,
    SendMessageResponse,
)
from toolchat_server.models.errors import ErrorBody, ErrorResponse, api_error
from toolchat_server.models.tool_servers import (
    ConnectServerRequest,
    ConnectServerResponse,
    ToolListResponse,
    ToolServerListResponse,
)

__all__ = [
    "ConnectServerRequest",
    "ConnectServerResponse",
    "ErrorBody",
    "ErrorResponse",
    "MessageResponse",
    "SendMessageRequest",
    "SendMessageResponse",
    "ToolListResponse",
    "ToolServerListResponse",
    "api_error",
]
