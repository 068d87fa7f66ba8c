"""
Tests for account lockout functionality.

Lockout rules:
- 5 failed attempts = 15 minute lock
- Successful login resets counter
- Lock expires after 15 minutes
"""

from httpx import AsyncClient


async def _fail_login(client: AsyncClient, user: dict, times: int = 1):
    response = None
    for _ in range(times):
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": user["username"], "password": "WrongPassword123"},
        )
    return response


class TestLockoutTriggering:
    """Tests for lockout activation."""

    async def test_first_four_failures_do_not_lock(self, async_client: AsyncClient, test_user: dict):
        """First 4 failed logins do not trigger lockout."""
        for _ in range(4):
            response = await _fail_login(async_client, test_user)
            assert response.status_code == 401
            assert response.json()["detail"]["error"]["code"] == "UNAUTHORIZED"

    async def test_sixth_attempt_reports_locked(self, async_client: AsyncClient, test_user: dict):
        """After 5 failures the account is locked."""
        await _fail_login(async_client, test_user, times=5)

        response = await _fail_login(async_client, test_user)
        assert response.status_code == 401
        assert response.json()["detail"]["error"]["code"] == "ACCOUNT_LOCKED"

    async def test_correct_password_during_lockout_still_blocked(
        self, async_client: AsyncClient, test_user: dict
    ):
        """Even correct password is rejected during lockout."""
        await _fail_login(async_client, test_user, times=5)

        response = await async_client.post(
            "/api/v1/auth/login",
            json={"email": test_user["username"], "password": test_user["password"]},
        )
        assert response.status_code == 401


class TestLockoutExpiration:
    """Tests for lockout expiration."""

    async def test_lockout_expires_after_15_minutes(
        self, async_client: AsyncClient, test_user: dict, frozen_time
    ):
        """Login allowed after 15 minutes pass."""
        with frozen_time("2026-02-01 12:00:00"):
            await _fail_login(async_client, test_user, times=5)

        with frozen_time("2026-02-01 12:16:00"):
            response = await async_client.post(
                "/api/v1/auth/login",
                json={"email": test_user["username"], "password": test_user["password"]},
            )
            assert response.status_code == 200


class TestLockoutReset:
    """Tests for lockout counter reset."""

    async def test_successful_login_resets_failure_count(
        self, async_client: AsyncClient, test_user: dict
    ):
        """Successful login resets failed_login_count to 0."""
        await _fail_login(async_client, test_user, times=3)

        response = await async_client.post(
            "/api/v1/auth/login",
            json={"email": test_user["username"], "password": test_user["password"]},
        )
        assert response.status_code == 200

        # Four more failures stay below the threshold
        for _ in range(4):
            response = await _fail_login(async_client, test_user)
            assert response.json()["detail"]["error"]["code"] == "UNAUTHORIZED"
