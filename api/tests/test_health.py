"""
Health check endpoint tests.

This is the first test to pass - validates basic test infrastructure.
"""

from httpx import AsyncClient


class TestHealthCheck:
    """Tests for GET /api/v1/health."""

    async def test_health_returns_200(self, async_client: AsyncClient):
        """Health check endpoint returns 200 OK."""
        response = await async_client.get("/api/v1/health")
        assert response.status_code == 200

    async def test_health_returns_healthy_status(self, async_client: AsyncClient):
        """Health check returns status: healthy."""
        response = await async_client.get("/api/v1/health")
        data = response.json()
        assert data["status"] == "healthy"

    async def test_health_does_not_require_auth(self, async_client: AsyncClient):
        """Health check works without authentication."""
        response = await async_client.get("/api/v1/health")
        assert response.status_code == 200


class TestErrorEnvelope:
    """Errors share the {"error": {"code", "message"}} shape."""

    async def test_validation_error_envelope(self, async_client: AsyncClient):
        response = await async_client.post("/api/v1/auth/register", json={})
        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    async def test_unauthenticated_envelope(self, async_client: AsyncClient):
        response = await async_client.get("/api/v1/users/me")
        assert response.status_code == 401
        assert response.json()["detail"]["error"]["code"] == "UNAUTHORIZED"
