"""Operations password guarding sensitive admin actions."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.password import hash_password, verify_password
from app.config import settings
from app.errors import bad_request, unauthorized
from app.models.admin_secret import OPERATIONS_PASSWORD_KEY, AdminSecret

logger = logging.getLogger(__name__)

MIN_OPERATIONS_PASSWORD_LENGTH = 8


class AdminSecurityService:
    """
    Stores the operations password as a hashed AdminSecret row.

    The row is seeded from ADMIN_OPERATIONS_PASSWORD the first time it is
    needed, so a fresh database always has a usable password.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _ensure_secret(self) -> AdminSecret:
        secret = await self.db.get(AdminSecret, OPERATIONS_PASSWORD_KEY)
        if secret is None:
            secret = AdminSecret(
                key=OPERATIONS_PASSWORD_KEY,
                value=hash_password(settings.admin_operations_password),
            )
            self.db.add(secret)
            await self.db.commit()
            logger.info("Seeded admin operations password")
        return secret

    async def validate_operations_password(self, password: str | None) -> bool:
        if not password:
            return False
        secret = await self._ensure_secret()
        return verify_password(password, secret.value)

    async def require_operations_password(self, password: str | None, missing_status: int = 400) -> None:
        """Raise unless the operations password matches; a missing value is 400 or 401 per caller."""
        if not password:
            if missing_status == 401:
                raise unauthorized("Operations password is required")
            raise bad_request("Operations password is required")
        if not await self.validate_operations_password(password):
            raise unauthorized("Invalid operations password")

    async def update_operations_password(self, current_password: str, new_password: str) -> None:
        if not new_password or len(new_password.strip()) < MIN_OPERATIONS_PASSWORD_LENGTH:
            raise bad_request(
                f"New password must be at least {MIN_OPERATIONS_PASSWORD_LENGTH} characters long"
            )
        secret = await self._ensure_secret()
        if not verify_password(current_password or "", secret.value):
            raise unauthorized("Current password is incorrect")
        secret.value = hash_password(new_password)
        await self.db.commit()
        logger.info("Admin operations password updated")
