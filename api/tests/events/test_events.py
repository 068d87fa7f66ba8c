"""Tests for the public upcoming events feed and admin event management."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

from httpx import AsyncClient

from app.services.events import display_date, resolve_event_type


def _iso(days: int) -> str:
    return (datetime.now(timezone.utc) + timedelta(days=days)).replace(microsecond=0).isoformat()


async def _create(client: AsyncClient, headers: dict, title: str, days: int, **extra) -> dict:
    response = await client.post(
        "/api/v1/admin/events",
        json={"title": title, "date": _iso(days), **extra},
        headers=headers,
    )
    assert response.status_code == 201
    return response.json()


class TestEventHelpers:
    """Type resolution and date display."""

    def test_type_is_case_insensitive(self):
        assert resolve_event_type("workshop") == "WORKSHOP"

    def test_unknown_type_falls_back_to_other(self):
        assert resolve_event_type("hackathon") == "OTHER"
        assert resolve_event_type(None) == "OTHER"

    def test_display_date(self):
        assert display_date(datetime(2026, 3, 5, tzinfo=timezone.utc)) == "March 5, 2026"

    def test_display_date_in_arabic(self):
        assert "مارس" in display_date(datetime(2026, 3, 5, tzinfo=timezone.utc), "ar")


class TestUpcomingEvents:
    """GET /api/v1/events/upcoming."""

    async def test_future_events_soonest_first(
        self, async_client: AsyncClient, test_admin: dict, auth_headers
    ):
        headers = auth_headers(test_admin)
        await _create(async_client, headers, "Later", 20)
        await _create(async_client, headers, "Sooner", 5)
        await _create(async_client, headers, "Yesterday", -1)

        response = await async_client.get("/api/v1/events/upcoming")
        events = response.json()
        assert [e["title"] for e in events] == ["Sooner", "Later"]
        assert all(e["status"] == "upcoming" for e in events)
        assert all(e["date_ar"] and e["date_ar"] != e["date"] for e in events)

    async def test_inactive_events_are_hidden(
        self, async_client: AsyncClient, test_admin: dict, auth_headers
    ):
        headers = auth_headers(test_admin)
        await _create(async_client, headers, "Hidden", 3, is_active=False)

        response = await async_client.get("/api/v1/events/upcoming")
        assert response.json() == []

    async def test_falls_back_to_recent_past_events(
        self, async_client: AsyncClient, test_admin: dict, auth_headers
    ):
        headers = auth_headers(test_admin)
        await _create(async_client, headers, "Last month", -30)
        await _create(async_client, headers, "Last week", -7)

        response = await async_client.get("/api/v1/events/upcoming")
        events = response.json()
        assert [e["title"] for e in events] == ["Last week", "Last month"]
        assert events[0]["status"] == "past"

    async def test_limit_and_non_positive_fallback(
        self, async_client: AsyncClient, test_admin: dict, auth_headers
    ):
        headers = auth_headers(test_admin)
        for day in range(1, 4):
            await _create(async_client, headers, f"Day {day}", day)

        limited = await async_client.get("/api/v1/events/upcoming", params={"limit": 2})
        assert len(limited.json()) == 2

        fallback = await async_client.get("/api/v1/events/upcoming", params={"limit": 0})
        assert len(fallback.json()) == 3


class TestAdminEvents:
    """Admin CRUD under /api/v1/admin/events."""

    async def test_create_resolves_type_and_creator(
        self, async_client: AsyncClient, test_admin: dict, auth_headers
    ):
        event = await _create(async_client, auth_headers(test_admin), "Methods workshop", 10, type="workshop")
        assert event["type"] == "WORKSHOP"
        assert event["creator"]["id"] == test_admin["user_id"]
        assert event["date"] == event["start_date"]

    async def test_update_toggle_and_delete(
        self, async_client: AsyncClient, test_admin: dict, auth_headers
    ):
        headers = auth_headers(test_admin)
        event = await _create(async_client, headers, "Draft", 10)

        updated = await async_client.patch(
            f"/api/v1/admin/events/{event['id']}", json={"title": "Final", "type": "seminar"}, headers=headers
        )
        assert updated.json()["title"] == "Final"
        assert updated.json()["type"] == "SEMINAR"

        toggled = await async_client.patch(f"/api/v1/admin/events/{event['id']}/toggle", headers=headers)
        assert toggled.json()["is_active"] is False

        deleted = await async_client.delete(f"/api/v1/admin/events/{event['id']}", headers=headers)
        assert deleted.status_code == 200
        listing = await async_client.get("/api/v1/admin/events", headers=headers)
        assert listing.json() == []

    async def test_missing_event_returns_404(
        self, async_client: AsyncClient, test_admin: dict, auth_headers
    ):
        response = await async_client.patch(
            f"/api/v1/admin/events/{uuid4()}/toggle", headers=auth_headers(test_admin)
        )
        assert response.status_code == 404

    async def test_non_admin_is_forbidden(
        self, async_client: AsyncClient, test_user: dict, auth_headers
    ):
        response = await async_client.post(
            "/api/v1/admin/events", json={"title": "Nope"}, headers=auth_headers(test_user)
        )
        assert response.status_code == 403
