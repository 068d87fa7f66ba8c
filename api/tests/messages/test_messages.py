"""Tests for /api/v1/messages direct messaging."""

from uuid import uuid4

from httpx import AsyncClient


async def _send(client: AsyncClient, headers: dict, recipient_id: str, content: str = "Hello there", **extra):
    response = await client.post(
        "/api/v1/messages/send",
        json={"recipient_id": recipient_id, "content": content, **extra},
        headers=headers,
    )
    assert response.status_code == 201
    return response.json()


class TestSendMessage:
    """POST /api/v1/messages/send."""

    async def test_send_returns_message(
        self, async_client: AsyncClient, test_user: dict, second_user: dict, auth_headers
    ):
        message = await _send(async_client, auth_headers(test_user), second_user["user_id"])
        assert message["sender_id"] == test_user["user_id"]
        assert message["recipient_id"] == second_user["user_id"]
        assert message["is_read"] is False
        assert message["reactions"] == []

    async def test_send_notifies_recipient(
        self, async_client: AsyncClient, test_user: dict, second_user: dict, auth_headers
    ):
        await _send(async_client, auth_headers(test_user), second_user["user_id"])

        response = await async_client.get("/api/v1/notifications", headers=auth_headers(second_user))
        notification = response.json()[0]
        assert notification["type"] == "MESSAGE"
        assert notification["payload"]["conversation_user_id"] == test_user["user_id"]

    async def test_reply_includes_preview(
        self, async_client: AsyncClient, test_user: dict, second_user: dict, auth_headers
    ):
        original = await _send(async_client, auth_headers(test_user), second_user["user_id"], "Question?")
        reply = await _send(
            async_client,
            auth_headers(second_user),
            test_user["user_id"],
            "Answer.",
            reply_to_id=original["id"],
        )
        assert reply["reply_to"]["id"] == original["id"]
        assert reply["reply_to"]["content"] == "Question?"
        assert reply["reply_to"]["sender_name"] == "Testuser"

    async def test_unknown_recipient_returns_404(
        self, async_client: AsyncClient, test_user: dict, auth_headers
    ):
        response = await async_client.post(
            "/api/v1/messages/send",
            json={"recipient_id": str(uuid4()), "content": "Anyone?"},
            headers=auth_headers(test_user),
        )
        assert response.status_code == 404

    async def test_blank_content_returns_422(
        self, async_client: AsyncClient, test_user: dict, second_user: dict, auth_headers
    ):
        response = await async_client.post(
            "/api/v1/messages/send",
            json={"recipient_id": second_user["user_id"], "content": "   "},
            headers=auth_headers(test_user),
        )
        assert response.status_code == 422


class TestConversations:
    """Conversation listing, reading and deletion."""

    async def test_conversation_is_chronological(
        self, async_client: AsyncClient, test_user: dict, second_user: dict, auth_headers
    ):
        await _send(async_client, auth_headers(test_user), second_user["user_id"], "one")
        await _send(async_client, auth_headers(second_user), test_user["user_id"], "two")

        response = await async_client.get(
            f"/api/v1/messages/conversation/{second_user['user_id']}", headers=auth_headers(test_user)
        )
        assert [m["content"] for m in response.json()] == ["one", "two"]

    async def test_conversation_list_has_last_message_and_unread(
        self, async_client: AsyncClient, test_user: dict, second_user: dict, auth_headers
    ):
        sender = auth_headers(second_user)
        await _send(async_client, sender, test_user["user_id"], "first")
        await _send(async_client, sender, test_user["user_id"], "second")

        response = await async_client.get("/api/v1/messages/conversations", headers=auth_headers(test_user))
        conversations = response.json()
        assert len(conversations) == 1
        assert conversations[0]["user_id"] == second_user["user_id"]
        assert conversations[0]["last_message"]["content"] == "second"
        assert conversations[0]["unread_count"] == 2

    async def test_mark_read_clears_unread_count(
        self, async_client: AsyncClient, test_user: dict, second_user: dict, auth_headers
    ):
        reader = auth_headers(test_user)
        await _send(async_client, auth_headers(second_user), test_user["user_id"])

        before = await async_client.get("/api/v1/messages/unread-count", headers=reader)
        assert before.json() == {"count": 1}

        await async_client.post(f"/api/v1/messages/mark-read/{second_user['user_id']}", headers=reader)

        after = await async_client.get("/api/v1/messages/unread-count", headers=reader)
        assert after.json() == {"count": 0}

    async def test_delete_conversation(
        self, async_client: AsyncClient, test_user: dict, second_user: dict, auth_headers
    ):
        headers = auth_headers(test_user)
        await _send(async_client, headers, second_user["user_id"], "one")
        await _send(async_client, auth_headers(second_user), test_user["user_id"], "two")

        response = await async_client.delete(
            f"/api/v1/messages/conversation/{second_user['user_id']}", headers=headers
        )
        assert response.status_code == 200
        assert response.json()["message"] == "Deleted 2 messages"

        remaining = await async_client.get(
            f"/api/v1/messages/conversation/{second_user['user_id']}", headers=headers
        )
        assert remaining.json() == []

    async def test_requires_auth(self, async_client: AsyncClient):
        response = await async_client.get("/api/v1/messages/conversations")
        assert response.status_code == 401


class TestReactions:
    """Reaction toggling and counts."""

    async def test_reaction_toggles_and_counts(
        self, async_client: AsyncClient, test_user: dict, second_user: dict, auth_headers
    ):
        message = await _send(async_client, auth_headers(test_user), second_user["user_id"])
        url = f"/api/v1/messages/{message['id']}/react"

        added = await async_client.post(url, json={"emoji": "👍"}, headers=auth_headers(second_user))
        assert added.json() == {"action": "added", "emoji": "👍"}
        await async_client.post(url, json={"emoji": "👍"}, headers=auth_headers(test_user))

        counts = await async_client.get(
            f"/api/v1/messages/{message['id']}/reactions", headers=auth_headers(test_user)
        )
        assert counts.json() == [{"emoji": "👍", "count": 2}]

        removed = await async_client.post(url, json={"emoji": "👍"}, headers=auth_headers(second_user))
        assert removed.json()["action"] == "removed"

    async def test_react_to_missing_message_returns_404(
        self, async_client: AsyncClient, test_user: dict, auth_headers
    ):
        response = await async_client.post(
            f"/api/v1/messages/{uuid4()}/react", json={"emoji": "👍"}, headers=auth_headers(test_user)
        )
        assert response.status_code == 404
