"""Tests for /api/v1/support team management and the contact form."""

import json

import pytest
from httpx import AsyncClient

from app.config import settings

OPERATIONS_PASSWORD = "Admin@12345"

CONTACT = {
    "name": "Visitor",
    "email": "visitor@example.com",
    "subject": "Account help",
    "message": "I cannot find the library upload page.",
}


@pytest.fixture(autouse=True)
def team_file(tmp_path, monkeypatch):
    """Point the support team file at a temp path with no env fallback."""
    path = tmp_path / "support-team.json"
    monkeypatch.setattr(settings, "support_team_file", str(path))
    monkeypatch.setattr(settings, "admin_operations_password", OPERATIONS_PASSWORD)
    monkeypatch.setattr(settings, "support_team_user_ids", "")
    return path


class TestSupportTeam:
    """GET and POST /api/v1/support/team."""

    async def test_empty_team_by_default(self, async_client: AsyncClient):
        response = await async_client.get("/api/v1/support/team")
        assert response.json() == {"user_ids": []}

    async def test_env_fallback_when_file_missing(self, async_client: AsyncClient, monkeypatch):
        monkeypatch.setattr(settings, "support_team_user_ids", "a, b")
        response = await async_client.get("/api/v1/support/team")
        assert response.json() == {"user_ids": ["a", "b"]}

    async def test_admin_sets_team_with_operations_password(
        self, async_client: AsyncClient, test_admin: dict, second_user: dict, auth_headers, team_file
    ):
        response = await async_client.post(
            "/api/v1/support/team",
            json={"user_ids": [second_user["user_id"], "  "], "operations_password": OPERATIONS_PASSWORD},
            headers=auth_headers(test_admin),
        )
        assert response.status_code == 200
        assert response.json() == {"ok": True, "user_ids": [second_user["user_id"]]}
        assert json.loads(team_file.read_text()) == {"userIds": [second_user["user_id"]]}

        listing = await async_client.get("/api/v1/support/team")
        assert listing.json() == {"user_ids": [second_user["user_id"]]}

    async def test_missing_operations_password_returns_401(
        self, async_client: AsyncClient, test_admin: dict, auth_headers
    ):
        response = await async_client.post(
            "/api/v1/support/team", json={"user_ids": []}, headers=auth_headers(test_admin)
        )
        assert response.status_code == 401

    async def test_wrong_operations_password_returns_401(
        self, async_client: AsyncClient, test_admin: dict, auth_headers
    ):
        response = await async_client.post(
            "/api/v1/support/team",
            json={"user_ids": [], "operations_password": "wrong-password"},
            headers=auth_headers(test_admin),
        )
        assert response.status_code == 401
        assert response.json()["detail"]["error"]["message"] == "Invalid operations password"

    async def test_non_admin_is_forbidden(self, async_client: AsyncClient, test_user: dict, auth_headers):
        response = await async_client.post(
            "/api/v1/support/team",
            json={"user_ids": [], "operations_password": OPERATIONS_PASSWORD},
            headers=auth_headers(test_user),
        )
        assert response.status_code == 403


class TestContactForm:
    """POST /api/v1/support/contact."""

    async def test_no_team_configured(self, async_client: AsyncClient):
        response = await async_client.post("/api/v1/support/contact", json=CONTACT)
        assert response.status_code == 200
        assert response.json() == {
            "ok": True,
            "delivered": 0,
            "deliveries": [],
            "note": "No support team configured",
        }

    async def test_delivers_system_message_to_team(
        self, async_client: AsyncClient, second_user: dict, auth_headers, team_file
    ):
        team_file.write_text(json.dumps({"userIds": [second_user["user_id"], "not-a-uuid"]}))

        response = await async_client.post("/api/v1/support/contact", json=CONTACT)
        data = response.json()
        assert data["delivered"] == 1
        assert data["deliveries"][0]["support_id"] == second_user["user_id"]

        conversations = await async_client.get(
            "/api/v1/messages/conversations", headers=auth_headers(second_user)
        )
        [conversation] = conversations.json()
        assert conversation["user_id"] is None
        assert conversation["last_message"]["sender_id"] is None
        assert conversation["last_message"]["context_type"] == "support-contact"
        assert "From: Visitor <visitor@example.com>" in conversation["last_message"]["content"]

    async def test_invalid_email_returns_422(self, async_client: AsyncClient):
        response = await async_client.post(
            "/api/v1/support/contact", json={**CONTACT, "email": "nope"}
        )
        assert response.status_code == 422
