"""Dependency injection providers for FastAPI endpoints.

This module provides FastAPI dependency functions that are used across
multiple routers to inject common dependencies like settings, clients,
services and the calling user.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Header, HTTPException, Request

from toolchat_server.config import ToolchatSettings
from toolchat_server.gemini import GeminiClient
from toolchat_server.mcp import ToolServerClient
from toolchat_server.models.errors import api_error
from toolchat_server.services import (
    ConversationService,
    MessageService,
    ToolRegistryService,
)
from toolchat_server.store import RecordStore


@lru_cache
def get_settings() -> ToolchatSettings:
    """Get the application settings instance.

    This function is cached so that the same settings instance is reused
    across all requests. Settings are loaded from environment variables
    with the TOOLCHAT_ prefix.

    Returns:
        ToolchatSettings: The application configuration settings.
    """
    return ToolchatSettings()


def get_owner(
    x_user_id: Annotated[str | None, Header()] = None,
) -> str:
    """Get the calling user's identity.

    Authentication happens upstream; the authenticating proxy forwards the
    verified user id in the ``X-User-Id`` header.

    Raises:
        HTTPException: 401 if the header is missing or blank.
    """
    if x_user_id is None or not x_user_id.strip():
        raise api_error(401, 4011, "Missing user identity")
    return x_user_id.strip()


def _get_state(request: Request, name: str, label: str):
    if not hasattr(request.app.state, name):
        raise HTTPException(
            status_code=503,
            detail=f"{label} not initialized",
        )
    return getattr(request.app.state, name)


def get_record_store(request: Request) -> RecordStore:
    """Get the record store from app state.

    Raises:
        HTTPException: If the store is not initialized (503 Service Unavailable).
    """
    return _get_state(request, "record_store", "Record store")


def get_gemini_client(request: Request) -> GeminiClient:
    """Get the Gemini client from app state.

    Raises:
        HTTPException: If the client is not initialized (503 Service Unavailable).
    """
    return _get_state(request, "gemini_client", "Gemini client")


def get_tool_server_client(request: Request) -> ToolServerClient:
    """Get the tool server client from app state.

    Raises:
        HTTPException: If the client is not initialized (503 Service Unavailable).
    """
    return _get_state(request, "tool_server_client", "Tool server client")


def get_message_service(request: Request) -> MessageService:
    """Get a MessageService bound to the app's record store."""
    return MessageService(store=get_record_store(request))


def get_tool_registry(request: Request) -> ToolRegistryService:
    """Get a ToolRegistryService bound to the app's store and tool client."""
    return ToolRegistryService(
        store=get_record_store(request),
        tool_client=get_tool_server_client(request),
    )


def get_conversation_service(request: Request) -> ConversationService:
    """Get a ConversationService wired to the app's clients and store.

    Uses settings from app.state so tests can run with isolated settings.
    """
    settings = request.app.state.settings
    store = get_record_store(request)
    tool_client = get_tool_server_client(request)

    return ConversationService(
        message_service=MessageService(store=store),
        tool_registry=ToolRegistryService(store=store, tool_client=tool_client),
        gemini_client=get_gemini_client(request),
        tool_client=tool_client,
        history_limit=settings.history_limit,
    )
