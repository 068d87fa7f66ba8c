"""
Tests for POST /api/v1/auth/register endpoint.

Registration creates an account and returns an access token with the profile.
"""

from httpx import AsyncClient


class TestRegisterSuccess:
    """Happy path registration scenarios."""

    async def test_register_with_valid_data_returns_201(
        self, async_client: AsyncClient, valid_registration_data: dict
    ):
        response = await async_client.post("/api/v1/auth/register", json=valid_registration_data)
        assert response.status_code == 201

    async def test_register_returns_token_and_profile(
        self, async_client: AsyncClient, valid_registration_data: dict
    ):
        """Response carries a bearer token and the private profile."""
        response = await async_client.post("/api/v1/auth/register", json=valid_registration_data)
        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["access_token"]
        assert data["user"]["username"] == "newuser"
        assert data["user"]["email"] == "newuser@example.com"
        assert data["user"]["university"] == "Birzeit University"
        assert "password_hash" not in data["user"]

    async def test_register_defaults_role_to_student(
        self, async_client: AsyncClient, valid_registration_data: dict
    ):
        response = await async_client.post("/api/v1/auth/register", json=valid_registration_data)
        assert response.json()["user"]["role"] == "STUDENT"

    async def test_register_lowercases_email(
        self, async_client: AsyncClient, valid_registration_data: dict
    ):
        valid_registration_data["email"] = "NewUser@Example.COM"
        response = await async_client.post("/api/v1/auth/register", json=valid_registration_data)
        assert response.status_code == 201
        assert response.json()["user"]["email"] == "newuser@example.com"

    async def test_registered_token_authenticates(
        self, async_client: AsyncClient, valid_registration_data: dict
    ):
        response = await async_client.post("/api/v1/auth/register", json=valid_registration_data)
        token = response.json()["access_token"]

        me = await async_client.get("/api/v1/users/me", headers={"Authorization": f"Bearer {token}"})
        assert me.status_code == 200
        assert me.json()["username"] == "newuser"


class TestRegisterConflicts:
    """Duplicate usernames and emails are rejected."""

    async def test_duplicate_username_returns_409(
        self, async_client: AsyncClient, test_user: dict, valid_registration_data: dict
    ):
        valid_registration_data["username"] = "TestUser"
        response = await async_client.post("/api/v1/auth/register", json=valid_registration_data)
        assert response.status_code == 409
        assert response.json()["detail"]["error"]["code"] == "CONFLICT"

    async def test_duplicate_email_returns_409(
        self, async_client: AsyncClient, test_user: dict, valid_registration_data: dict
    ):
        valid_registration_data["email"] = "TEST@example.com"
        response = await async_client.post("/api/v1/auth/register", json=valid_registration_data)
        assert response.status_code == 409


class TestRegisterValidation:
    """Input validation for registration."""

    async def test_weak_password_returns_422(
        self, async_client: AsyncClient, valid_registration_data: dict
    ):
        valid_registration_data["password"] = "password"
        response = await async_client.post("/api/v1/auth/register", json=valid_registration_data)
        assert response.status_code == 422

    async def test_invalid_username_returns_422(
        self, async_client: AsyncClient, valid_registration_data: dict
    ):
        valid_registration_data["username"] = "bad name!"
        response = await async_client.post("/api/v1/auth/register", json=valid_registration_data)
        assert response.status_code == 422

    async def test_invalid_email_returns_422(
        self, async_client: AsyncClient, valid_registration_data: dict
    ):
        valid_registration_data["email"] = "not-an-email"
        response = await async_client.post("/api/v1/auth/register", json=valid_registration_data)
        assert response.status_code == 422

    async def test_admin_role_cannot_be_self_assigned(
        self, async_client: AsyncClient, valid_registration_data: dict
    ):
        valid_registration_data["role"] = "ADMIN"
        response = await async_client.post("/api/v1/auth/register", json=valid_registration_data)
        assert response.status_code == 422
