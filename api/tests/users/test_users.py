"""Tests for /api/v1/users profile endpoints."""

from uuid import uuid4

from httpx import AsyncClient


class TestOwnProfile:
    """GET and PATCH /api/v1/users/me."""

    async def test_get_me_includes_private_fields(
        self, async_client: AsyncClient, test_user: dict, auth_headers
    ):
        response = await async_client.get("/api/v1/users/me", headers=auth_headers(test_user))
        assert response.status_code == 200
        data = response.json()
        assert data["email"] == test_user["email"]
        assert data["preferred_languages"] == ["ar", "en"]

    async def test_patch_updates_only_sent_fields(
        self, async_client: AsyncClient, test_user: dict, auth_headers
    ):
        response = await async_client.patch(
            "/api/v1/users/me",
            json={"bio": "Working on Arabic NLP", "skills": ["python", "nlp"]},
            headers=auth_headers(test_user),
        )
        assert response.status_code == 200
        data = response.json()
        assert data["bio"] == "Working on Arabic NLP"
        assert data["skills"] == ["python", "nlp"]
        assert data["university"] == "Birzeit University"

    async def test_patch_custom_links(self, async_client: AsyncClient, test_user: dict, auth_headers):
        response = await async_client.patch(
            "/api/v1/users/me",
            json={"custom_links": [{"name": "Blog", "url": "https://blog.example.com"}]},
            headers=auth_headers(test_user),
        )
        assert response.status_code == 200
        assert response.json()["custom_links"] == [{"name": "Blog", "url": "https://blog.example.com"}]

    async def test_patch_taken_username_returns_409(
        self, async_client: AsyncClient, test_user: dict, second_user: dict, auth_headers
    ):
        response = await async_client.patch(
            "/api/v1/users/me",
            json={"username": "SecondUser"},
            headers=auth_headers(test_user),
        )
        assert response.status_code == 409

    async def test_patch_taken_email_returns_409(
        self, async_client: AsyncClient, test_user: dict, second_user: dict, auth_headers
    ):
        response = await async_client.patch(
            "/api/v1/users/me",
            json={"email": second_user["email"]},
            headers=auth_headers(test_user),
        )
        assert response.status_code == 409

    async def test_overlong_bio_returns_422(
        self, async_client: AsyncClient, test_user: dict, auth_headers
    ):
        response = await async_client.patch(
            "/api/v1/users/me", json={"bio": "x" * 2001}, headers=auth_headers(test_user)
        )
        assert response.status_code == 422


class TestPublicProfile:
    """GET /api/v1/users/{id}."""

    async def test_public_profile_hides_contact_details(
        self, async_client: AsyncClient, test_user: dict
    ):
        response = await async_client.get(f"/api/v1/users/{test_user['user_id']}")
        assert response.status_code == 200
        data = response.json()
        assert data["username"] == "testuser"
        assert "email" not in data
        assert "phone" not in data

    async def test_unknown_user_returns_404(self, async_client: AsyncClient):
        response = await async_client.get(f"/api/v1/users/{uuid4()}")
        assert response.status_code == 404


class TestUserSearch:
    """GET /api/v1/users/search."""

    async def test_search_matches_university(
        self, async_client: AsyncClient, test_user: dict, second_user: dict, auth_headers
    ):
        response = await async_client.get(
            "/api/v1/users/search", params={"q": "birzeit"}, headers=auth_headers(second_user)
        )
        assert response.status_code == 200
        usernames = [u["username"] for u in response.json()]
        assert usernames == ["testuser"]

    async def test_blank_query_returns_empty_list(
        self, async_client: AsyncClient, test_user: dict, auth_headers
    ):
        response = await async_client.get(
            "/api/v1/users/search", params={"q": "  "}, headers=auth_headers(test_user)
        )
        assert response.json() == []

    async def test_search_requires_auth(self, async_client: AsyncClient):
        response = await async_client.get("/api/v1/users/search", params={"q": "test"})
        assert response.status_code == 401
