"""API tests for the message history endpoints."""

import pytest


async def chat(client, text, headers):
    response = await client.post("/api/v1/chat", json={"text": text}, headers=headers)
    assert response.status_code == 200
    return response.json()


@pytest.mark.asyncio
async def test_list_messages_empty(async_client, user_headers):
    response = await async_client.get("/api/v1/messages", headers=user_headers)

    assert response.status_code == 200
    assert response.json() == {"messages": [], "total": 0, "limit": 50, "offset": 0}


@pytest.mark.asyncio
async def test_list_messages_newest_first(async_client, user_headers):
    """Test that both sides of each exchange are listed newest first."""
    await chat(async_client, "first", user_headers)
    await chat(async_client, "second", user_headers)

    response = await async_client.get("/api/v1/messages", headers=user_headers)

    data = response.json()
    assert data["total"] == 4
    assert [(m["text"], m["own"]) for m in data["messages"]] == [
        ("Hello!", False),
        ("second", True),
        ("Hello!", False),
        ("first", True),
    ]


@pytest.mark.asyncio
async def test_list_messages_pagination(async_client, user_headers):
    await chat(async_client, "first", user_headers)
    await chat(async_client, "second", user_headers)

    response = await async_client.get(
        "/api/v1/messages", params={"limit": 2, "offset": 1}, headers=user_headers
    )

    data = response.json()
    assert data["total"] == 4
    assert data["limit"] == 2
    assert data["offset"] == 1
    assert [m["text"] for m in data["messages"]] == ["second", "Hello!"]


@pytest.mark.asyncio
@pytest.mark.parametrize("params", [{"limit": 0}, {"limit": 501}, {"offset": -1}])
async def test_list_messages_rejects_bad_paging(async_client, params, user_headers):
    response = await async_client.get(
        "/api/v1/messages", params=params, headers=user_headers
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_history_is_sent_to_model(async_client, gemini_mock, user_headers):
    """Test that earlier turns are replayed on the next chat."""
    await chat(async_client, "first", user_headers)
    await chat(async_client, "second", user_headers)

    history = gemini_mock.complete.call_args.args[1]
    assert [(turn.role, turn.text) for turn in history] == [
        ("user", "first"),
        ("model", "Hello!"),
    ]


@pytest.mark.asyncio
async def test_clear_messages(async_client, user_headers, other_user_headers):
    """Test that clearing removes only the caller's messages."""
    await chat(async_client, "mine", user_headers)
    await chat(async_client, "theirs", headers=other_user_headers)

    response = await async_client.delete("/api/v1/messages", headers=user_headers)

    assert response.status_code == 200
    assert response.json() == {
        "message": "All messages cleared successfully",
        "deleted_count": 2,
    }

    mine = await async_client.get("/api/v1/messages", headers=user_headers)
    theirs = await async_client.get("/api/v1/messages", headers=other_user_headers)
    assert mine.json()["total"] == 0
    assert theirs.json()["total"] == 2


@pytest.mark.asyncio
async def test_messages_require_user_identity(async_client):
    response = await async_client.get("/api/v1/messages")

    assert response.status_code == 401
