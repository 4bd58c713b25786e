"""Fixtures for API-level tests.

The outbound clients are replaced with mocks before the app lifespan runs, so
these tests exercise the routers, dependencies, services and the real record
store without touching the network.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from toolchat_server.gemini import ModelReply, TextPart
from toolchat_server.mcp import DiscoveredTool, DiscoveryResult, ToolResult

@pytest.fixture(autouse=True)
def gemini_mock():
    """Replace the Gemini client created at startup."""
    client = MagicMock()
    client.model = "gemini-test"
    client.complete = AsyncMock(
        return_value=ModelReply(parts=[TextPart(text="Hello!")], finish_reason="STOP")
    )
    client.check_connection = AsyncMock(return_value=False)
    client.close = AsyncMock()

    with patch("toolchat_server.app.GeminiClient", return_value=client):
        yield client


@pytest.fixture(autouse=True)
def tool_client_mock():
    """Replace the tool server client created at startup."""
    client = MagicMock()
    client.discover_tools = AsyncMock(
        return_value=DiscoveryResult.ok(
            [
                DiscoveredTool(
                    tool_name="lookup_order",
                    tool_description="Find an order",
                    input_schema={
                        "type": "object",
                        "properties": {"id": {"type": "integer"}},
                    },
                ),
                DiscoveredTool(tool_name="cancel_order"),
            ]
        )
    )
    client.invoke_tool = AsyncMock(return_value=ToolResult.ok({"status": "shipped"}))
    client.close = AsyncMock()

    with patch("toolchat_server.app.ToolServerClient", return_value=client):
        yield client


@pytest.fixture
def user_headers():
    return {"X-User-Id": "alice"}


@pytest.fixture
def other_user_headers():
    return {"X-User-Id": "bob"}


@pytest.fixture
def connect_orders_server(async_client, user_headers):
    """Return a helper registering the mocked order tool server.

    The helper returns the JSON body of the 201 response.
    """

    async def connect(headers=None, name="orders"):
        response = await async_client.post(
            "/api/v1/tool-servers",
            json={"name": name, "base_url": "http://tools.test", "api_key": "secret"},
            headers=headers or user_headers,
        )
        assert response.status_code == 201
        return response.json()

    return connect
