"""Tests for POST /api/v1/reports."""

from httpx import AsyncClient


class TestCreateReport:
    """Filing reports against content."""

    async def test_report_is_created_pending(
        self, async_client: AsyncClient, test_user: dict, auth_headers
    ):
        response = await async_client.post(
            "/api/v1/reports",
            json={"target_type": "post", "target_id": "abc", "type": "SPAM", "reason": "Advertising"},
            headers=auth_headers(test_user),
        )
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["report"]["status"] == "PENDING"
        assert data["report"]["type"] == "SPAM"
        assert data["report"]["reporter_id"] == test_user["user_id"]

    async def test_type_defaults_to_other(
        self, async_client: AsyncClient, test_user: dict, auth_headers
    ):
        response = await async_client.post(
            "/api/v1/reports",
            json={"target_type": "question", "target_id": "q1", "reason": "Off topic"},
            headers=auth_headers(test_user),
        )
        assert response.json()["report"]["type"] == "OTHER"

    async def test_repeat_report_is_declined(
        self, async_client: AsyncClient, test_user: dict, auth_headers
    ):
        payload = {"target_type": "comment", "target_id": "c1", "reason": "Rude"}
        headers = auth_headers(test_user)
        await async_client.post("/api/v1/reports", json=payload, headers=headers)

        response = await async_client.post("/api/v1/reports", json=payload, headers=headers)
        data = response.json()
        assert data["success"] is False
        assert data["message"] == "You have already reported this content"
        assert data["report"] is None

    async def test_other_users_can_report_same_target(
        self, async_client: AsyncClient, test_user: dict, second_user: dict, auth_headers
    ):
        payload = {"target_type": "post", "target_id": "p1", "reason": "Spam"}
        await async_client.post("/api/v1/reports", json=payload, headers=auth_headers(test_user))

        response = await async_client.post("/api/v1/reports", json=payload, headers=auth_headers(second_user))
        assert response.json()["success"] is True

    async def test_blank_reason_returns_422(
        self, async_client: AsyncClient, test_user: dict, auth_headers
    ):
        response = await async_client.post(
            "/api/v1/reports",
            json={"target_type": "post", "target_id": "p1", "reason": "  "},
            headers=auth_headers(test_user),
        )
        assert response.status_code == 422

    async def test_unknown_target_type_returns_422(
        self, async_client: AsyncClient, test_user: dict, auth_headers
    ):
        response = await async_client.post(
            "/api/v1/reports",
            json={"target_type": "user", "target_id": "u1", "reason": "Spam"},
            headers=auth_headers(test_user),
        )
        assert response.status_code == 422
