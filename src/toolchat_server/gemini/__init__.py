"""Gemini client wrapper and integration layer.

This package provides the async client for the Gemini generateContent API
and the types used to build requests and decode replies.
"""

from toolchat_server.gemini.client import GeminiClient
from toolchat_server.gemini.types import (
    ROLE_MODEL,
    ROLE_USER,
    ConversationTurn,
    FunctionCallPart,
    ModelReply,
    TextPart,
    ToolSchema,
    all_function_calls,
    build_function_declarations,
    first_text,
)

__all__ = [
    "GeminiClient",
    "ConversationTurn",
    "FunctionCallPart",
    "ModelReply",
    "TextPart",
    "ToolSchema",
    "ROLE_USER",
    "ROLE_MODEL",
    "all_function_calls",
    "build_function_declarations",
    "first_text",
]
