"""FastAPI application factory and lifespan management.

This module contains the create_app() factory function that creates and configures
the FastAPI application instance, including lifespan management for startup/shutdown
and router registration.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from toolchat_server.config import ToolchatSettings
from toolchat_server.gemini import GeminiClient
from toolchat_server.mcp import ToolServerClient
from toolchat_server.routers import chat, health, messages, tool_servers
from toolchat_server.store import UNIQUE_KEYS, JsonRecordStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan context manager for FastAPI application.

    The record store and the outbound HTTP clients are created once at
    startup and stored in app.state for reuse across all requests.

    Args:
        app: The FastAPI application instance.

    Yields:
        None: Control is yielded while the app is running.
    """
    settings: ToolchatSettings = app.state.settings

    app.state.record_store = JsonRecordStore(
        store_dir=settings.resolved_store_dir,
        unique_keys=UNIQUE_KEYS,
    )
    logger.info(f"Record store ready at: {settings.resolved_store_dir}")

    app.state.gemini_client = GeminiClient(
        api_key=settings.gemini_api_key,
        api_url=settings.gemini_api_url,
        model=settings.gemini_model,
        timeout=settings.model_timeout,
    )
    app.state.tool_server_client = ToolServerClient(timeout=settings.tool_timeout)

    if not settings.gemini_api_key:
        logger.warning("No Gemini API key configured - set TOOLCHAT_GEMINI_API_KEY")
    elif await app.state.gemini_client.check_connection():
        logger.info(f"Successfully connected to Gemini model {settings.gemini_model}")
    else:
        logger.warning("Could not reach Gemini - check API key and network")

    yield

    if hasattr(app.state, "tool_server_client"):
        await app.state.tool_server_client.close()
        logger.info("Tool server client closed")
    if hasattr(app.state, "gemini_client"):
        await app.state.gemini_client.close()
        logger.info("Gemini client closed")


def create_app(settings: ToolchatSettings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional ToolchatSettings instance. If not provided,
                  settings will be loaded from environment variables.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    if settings is None:
        from toolchat_server.dependencies import get_settings

        settings = get_settings()

    app = FastAPI(
        title="toolchat-server",
        description="Headless FastAPI server for tool-augmented LLM conversations",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Store settings in app.state for lifespan access
    app.state.settings = settings

    # Note: FastAPI's type hints for add_middleware are overly strict
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(chat.router)
    app.include_router(messages.router)
    app.include_router(tool_servers.router)

    return app
