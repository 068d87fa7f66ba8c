"""Tests for topic suggestions and their admin review."""

from uuid import uuid4

from httpx import AsyncClient


async def _suggest(client: AsyncClient, headers: dict, topic: str = "Open science in the Arab world") -> dict:
    response = await client.post(
        "/api/v1/topic-suggestions",
        json={"topic": topic, "description": "A discussion series."},
        headers=headers,
    )
    assert response.status_code == 201
    return response.json()


class TestSuggestTopics:
    """User-facing suggestion routes."""

    async def test_create_is_pending_and_shows_suggester(
        self, async_client: AsyncClient, test_user: dict, auth_headers
    ):
        suggestion = await _suggest(async_client, auth_headers(test_user))
        assert suggestion["status"] == "PENDING"
        assert suggestion["suggested_by"] == test_user["user_id"]
        assert suggestion["user"]["email"] == test_user["email"]

    async def test_blank_topic_returns_422(
        self, async_client: AsyncClient, test_user: dict, auth_headers
    ):
        response = await async_client.post(
            "/api/v1/topic-suggestions", json={"topic": "   "}, headers=auth_headers(test_user)
        )
        assert response.status_code == 422

    async def test_my_suggestions_only_lists_own(
        self, async_client: AsyncClient, test_user: dict, second_user: dict, auth_headers
    ):
        await _suggest(async_client, auth_headers(test_user), "Mine")
        await _suggest(async_client, auth_headers(second_user), "Theirs")

        response = await async_client.get(
            "/api/v1/topic-suggestions/my-suggestions", headers=auth_headers(test_user)
        )
        assert [s["topic"] for s in response.json()] == ["Mine"]

    async def test_only_suggester_can_delete(
        self, async_client: AsyncClient, test_user: dict, second_user: dict, auth_headers
    ):
        suggestion = await _suggest(async_client, auth_headers(test_user))
        url = f"/api/v1/topic-suggestions/{suggestion['id']}"

        assert (await async_client.delete(url, headers=auth_headers(second_user))).status_code == 403
        assert (await async_client.delete(url, headers=auth_headers(test_user))).status_code == 200

    async def test_delete_missing_returns_404(
        self, async_client: AsyncClient, test_user: dict, auth_headers
    ):
        response = await async_client.delete(
            f"/api/v1/topic-suggestions/{uuid4()}", headers=auth_headers(test_user)
        )
        assert response.status_code == 404


class TestAdminTopicReview:
    """Admin routes under /api/v1/admin/topics."""

    async def test_status_update_and_filter(
        self, async_client: AsyncClient, test_user: dict, test_admin: dict, auth_headers
    ):
        admin = auth_headers(test_admin)
        approved = await _suggest(async_client, auth_headers(test_user), "Approve me")
        await _suggest(async_client, auth_headers(test_user), "Leave me")

        response = await async_client.patch(
            f"/api/v1/admin/topics/{approved['id']}/status", json={"status": "APPROVED"}, headers=admin
        )
        assert response.json()["status"] == "APPROVED"

        filtered = await async_client.get("/api/v1/admin/topics", params={"status": "APPROVED"}, headers=admin)
        assert [t["topic"] for t in filtered.json()] == ["Approve me"]

        everything = await async_client.get("/api/v1/admin/topics", headers=admin)
        assert len(everything.json()) == 2

    async def test_invalid_status_returns_422(
        self, async_client: AsyncClient, test_user: dict, test_admin: dict, auth_headers
    ):
        suggestion = await _suggest(async_client, auth_headers(test_user))
        response = await async_client.patch(
            f"/api/v1/admin/topics/{suggestion['id']}/status",
            json={"status": "MAYBE"},
            headers=auth_headers(test_admin),
        )
        assert response.status_code == 422

    async def test_admin_delete(
        self, async_client: AsyncClient, test_user: dict, test_admin: dict, auth_headers
    ):
        suggestion = await _suggest(async_client, auth_headers(test_user))
        response = await async_client.delete(
            f"/api/v1/admin/topics/{suggestion['id']}", headers=auth_headers(test_admin)
        )
        assert response.status_code == 200
