"""Pytest configuration and shared fixtures for toolchat-server tests.

This module provides common fixtures used across all test modules,
including test app creation and async client setup.
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from toolchat_server import create_app
from toolchat_server.config import ToolchatSettings


@pytest.fixture
def test_settings(tmp_path):
    """Create test settings with an isolated temporary data directory.

    Args:
        tmp_path: Pytest fixture providing a temporary directory.

    Returns:
        ToolchatSettings: Settings instance configured for testing.
    """
    return ToolchatSettings(
        host="127.0.0.1",
        port=8000,
        gemini_api_key="",
        gemini_model="gemini-test",
        data_dir=str(tmp_path),
        store_dir="data",
        history_limit=20,
        log_level="DEBUG",
        cors_origins=["*"],
    )


@pytest.fixture
def test_app(test_settings):
    """Create a FastAPI test application instance."""
    return create_app(settings=test_settings)


@pytest_asyncio.fixture
async def async_client(test_app):
    """Create an async HTTP client for testing FastAPI endpoints.

    Yields:
        AsyncClient: Async HTTP client for making test requests.
    """
    # Trigger the lifespan startup manually for tests
    async with test_app.router.lifespan_context(test_app):
        transport = ASGITransport(app=test_app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
