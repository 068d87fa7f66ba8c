"""Authentication dependencies for FastAPI endpoints."""

from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.jwt import decode_token
from app.database import get_db
from app.errors import forbidden, unauthorized
from app.models.types import as_utc, utcnow
from app.models.user import User

bearer_scheme = HTTPBearer(auto_error=False)


async def _user_from_credentials(
    credentials: HTTPAuthorizationCredentials | None,
    db: AsyncSession,
) -> User | None:
    if credentials is None or not credentials.credentials:
        return None

    payload = decode_token(credentials.credentials)
    if not payload or payload.get("type") != "access" or not payload.get("sub"):
        raise unauthorized("Invalid or expired token")

    try:
        user_id = UUID(payload["sub"])
    except ValueError:
        raise unauthorized("Invalid or expired token")

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if not user:
        raise unauthorized("User no longer exists")

    if user.is_banned:
        banned_until = as_utc(user.banned_until)
        if banned_until is None or banned_until > utcnow():
            raise forbidden("Your account has been banned")

    return user


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Validate the bearer token and return the authenticated user.

    Raises:
        HTTPException: 401 if the token is missing or invalid, 403 if the user is banned
    """
    user = await _user_from_credentials(credentials, db)
    if user is None:
        raise unauthorized("Authentication required")
    return user


async def get_optional_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User | None:
    """Return the authenticated user when a valid token is sent, otherwise None."""
    try:
        return await _user_from_credentials(credentials, db)
    except HTTPException as exc:
        if exc.status_code == status.HTTP_401_UNAUTHORIZED:
            return None
        raise


async def require_admin(user: User = Depends(get_current_user)) -> User:
    """
    Require the authenticated user to have the ADMIN role.

    Raises:
        HTTPException: 403 if user is not an admin
    """
    if not user.is_admin:
        raise forbidden("Admin access required")
    return user
