"""API tests for the chat and tool invocation endpoints."""

import pytest

from toolchat_server.errors import ModelResponseError
from toolchat_server.gemini import FunctionCallPart, ModelReply, TextPart
from toolchat_server.mcp import ToolResult


@pytest.mark.asyncio
async def test_chat_requires_user_identity(async_client):
    """Test that requests without X-User-Id are rejected."""
    response = await async_client.post("/api/v1/chat", json={"text": "Hi"})

    assert response.status_code == 401
    assert response.json()["detail"]["error"]["code"] == 4011


@pytest.mark.asyncio
async def test_chat_blank_user_identity(async_client):
    response = await async_client.post(
        "/api/v1/chat", json={"text": "Hi"}, headers={"X-User-Id": "  "}
    )

    assert response.status_code == 401


@pytest.mark.asyncio
@pytest.mark.parametrize("text", ["", "x" * 5001])
async def test_chat_validates_text_length(
    async_client, gemini_mock, text, user_headers
):
    """Test that empty and oversized messages are rejected before any work."""
    response = await async_client.post(
        "/api/v1/chat", json={"text": text}, headers=user_headers
    )

    assert response.status_code == 422
    gemini_mock.complete.assert_not_awaited()


@pytest.mark.asyncio
async def test_chat_plain_reply(async_client, gemini_mock, user_headers):
    """Test a chat turn without tools."""
    response = await async_client.post(
        "/api/v1/chat", json={"text": "What's 2+2?"}, headers=user_headers
    )

    assert response.status_code == 200
    data = response.json()
    assert data["user_message"]["text"] == "What's 2+2?"
    assert data["user_message"]["own"] is True
    assert data["user_message"]["owner"] == "alice"
    assert data["bot_message"]["text"] == "Hello!"
    assert data["bot_message"]["own"] is False
    assert "tools_used" not in data
    gemini_mock.complete.assert_awaited_once_with("What's 2+2?", [], None)


@pytest.mark.asyncio
async def test_chat_model_failure(async_client, gemini_mock, user_headers):
    """Test that a failed model call is a 502 and the user message is kept."""
    gemini_mock.complete.side_effect = ModelResponseError("No response from Gemini API")

    response = await async_client.post(
        "/api/v1/chat", json={"text": "Hi"}, headers=user_headers
    )

    assert response.status_code == 502
    error = response.json()["detail"]["error"]
    assert error["code"] == 7002
    assert error["details"] == {"user_message_saved": True}

    messages = await async_client.get("/api/v1/messages", headers=user_headers)
    assert messages.json()["total"] == 1


@pytest.mark.asyncio
async def test_chat_with_tool_call(
    async_client, gemini_mock, tool_client_mock, user_headers, connect_orders_server
):
    """Test a chat turn where the model calls a registered tool."""
    await connect_orders_server()
    gemini_mock.complete.side_effect = [
        ModelReply(parts=[FunctionCallPart(name="lookup_order", args={"id": 42})]),
        ModelReply(parts=[TextPart(text="Order 42 has shipped.")]),
    ]

    response = await async_client.post(
        "/api/v1/chat", json={"text": "Look up order #42"}, headers=user_headers
    )

    assert response.status_code == 200
    data = response.json()
    assert data["tools_used"] == ["lookup_order"]
    assert data["bot_message"]["text"] == "Order 42 has shipped."

    offered = gemini_mock.complete.call_args_list[0].args[2]
    assert [schema.name for schema in offered] == ["lookup_order", "cancel_order"]

    server, tool, call = tool_client_mock.invoke_tool.call_args.args
    assert server.base_url == "http://tools.test"
    assert server.api_key == "secret"
    assert tool.name == "lookup_order"
    assert call.arguments == {"id": 42}

    message_id = data["user_message"]["id"]
    invocations = await async_client.get(
        f"/api/v1/messages/{message_id}/tool-invocations", headers=user_headers
    )
    assert invocations.status_code == 200
    body = invocations.json()
    assert body["message_id"] == message_id
    assert len(body["invocations"]) == 1
    invocation = body["invocations"][0]
    assert invocation["input"] == {"id": 42}
    assert invocation["output"] == {"status": "shipped"}
    assert invocation["status"] == "success"


@pytest.mark.asyncio
async def test_chat_with_failing_tool(
    async_client, gemini_mock, tool_client_mock, user_headers, connect_orders_server
):
    """Test that a failing tool still produces a reply and an error record."""
    await connect_orders_server()
    tool_client_mock.invoke_tool.return_value = ToolResult.fail("timeout")
    gemini_mock.complete.side_effect = [
        ModelReply(parts=[FunctionCallPart(name="lookup_order", args={"id": 42})]),
        ModelReply(parts=[TextPart(text="The order service is not responding.")]),
    ]

    response = await async_client.post(
        "/api/v1/chat", json={"text": "Look up order #42"}, headers=user_headers
    )

    assert response.status_code == 200
    message_id = response.json()["user_message"]["id"]
    invocations = await async_client.get(
        f"/api/v1/messages/{message_id}/tool-invocations", headers=user_headers
    )
    invocation = invocations.json()["invocations"][0]
    assert invocation["status"] == "error"
    assert invocation["error_message"] == "timeout"


@pytest.mark.asyncio
async def test_chat_follow_up_failure(
    async_client, gemini_mock, user_headers, connect_orders_server
):
    """Test that a failed follow-up call is a 502 with its own code."""
    await connect_orders_server()
    gemini_mock.complete.side_effect = [
        ModelReply(parts=[FunctionCallPart(name="lookup_order", args={"id": 42})]),
        ModelResponseError("Gemini API request timed out"),
    ]

    response = await async_client.post(
        "/api/v1/chat", json={"text": "Look up order #42"}, headers=user_headers
    )

    assert response.status_code == 502
    assert response.json()["detail"]["error"]["code"] == 7004


@pytest.mark.asyncio
async def test_other_users_tools_are_not_offered(
    async_client, gemini_mock, user_headers, other_user_headers, connect_orders_server
):
    """Test that tools registered by one user are invisible to another."""
    await connect_orders_server(headers=other_user_headers)

    await async_client.post("/api/v1/chat", json={"text": "Hi"}, headers=user_headers)

    assert gemini_mock.complete.call_args.args[2] is None


@pytest.mark.asyncio
async def test_tool_invocations_unknown_message(async_client, user_headers):
    response = await async_client.get(
        "/api/v1/messages/999/tool-invocations", headers=user_headers
    )

    assert response.status_code == 404
    assert response.json()["detail"]["error"]["code"] == 4041


@pytest.mark.asyncio
async def test_tool_invocations_of_other_user(
    async_client, user_headers, other_user_headers
):
    """Test that another user's message cannot be inspected."""
    response = await async_client.post(
        "/api/v1/chat", json={"text": "Hi"}, headers=user_headers
    )
    message_id = response.json()["user_message"]["id"]

    response = await async_client.get(
        f"/api/v1/messages/{message_id}/tool-invocations", headers=other_user_headers
    )

    assert response.status_code == 404
