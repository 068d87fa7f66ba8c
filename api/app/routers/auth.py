"""Authentication router for registration, login and password changes."""

import logging
from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_user
from app.auth.jwt import create_access_token
from app.auth.password import hash_password, verify_password
from app.database import get_db
from app.errors import conflict, unauthorized
from app.middleware.rate_limit import LOGIN_LIMIT, REGISTER_LIMIT, limiter
from app.models.types import as_utc, utcnow
from app.models.user import User
from app.schemas.auth import AuthResponse, ChangePasswordRequest, LoginRequest, RegisterRequest
from app.schemas.common import StatusResponse
from app.schemas.users import UserPrivateResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/auth", tags=["Auth"])

LOCKOUT_THRESHOLD = 5  # Number of failed attempts before lockout
LOCKOUT_DURATION_MINUTES = 15  # Duration of lockout in minutes


def _auth_response(user: User) -> AuthResponse:
    return AuthResponse(
        access_token=create_access_token(str(user.id), user.role),
        user=UserPrivateResponse.model_validate(user),
    )


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit(REGISTER_LIMIT)
async def register(
    request: Request,
    data: RegisterRequest,
    db: AsyncSession = Depends(get_db),
) -> AuthResponse:
    """
    Create a new user account.

    Returns the new profile together with an access token.
    """
    # Check for existing username or email (case-insensitive)
    existing = await db.execute(
        select(User).where(
            or_(
                func.lower(User.username) == data.username.lower(),
                func.lower(User.email) == data.email.lower(),
            )
        )
    )
    if existing.scalars().first():
        raise conflict("Username or email already exists")

    user = User(
        username=data.username,
        email=data.email.lower(),
        password_hash=hash_password(data.password),
        full_name=data.full_name,
        role=data.role,
        major=data.major,
        university=data.university,
        country=data.country,
        city=data.city,
    )
    db.add(user)

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise conflict("Username or email already exists")

    await db.refresh(user)
    logger.info("Registered user %s", user.id)
    return _auth_response(user)


@router.post(
    "/login",
    response_model=AuthResponse,
    status_code=status.HTTP_200_OK,
)
@limiter.limit(LOGIN_LIMIT)
async def login(
    request: Request,
    data: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> AuthResponse:
    """
    Authenticate a user and issue an access token.

    Accepts an email or a username in the 'email' field.
    """
    identifier = data.email.strip().lower()
    result = await db.execute(
        select(User).where(
            or_(
                func.lower(User.email) == identifier,
                func.lower(User.username) == identifier,
            )
        )
    )
    user = result.scalars().first()

    if not user:
        raise unauthorized("Invalid email or password")

    # Check if account is locked
    now = utcnow()
    locked_until = as_utc(user.locked_until)
    if locked_until and locked_until <= now:
        user.locked_until = None
        user.failed_login_count = 0
        locked_until = None

    if locked_until and locked_until > now:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "error": {
                    "code": "ACCOUNT_LOCKED",
                    "message": "Account is temporarily locked due to too many failed login attempts",
                }
            },
        )

    if not verify_password(data.password, user.password_hash):
        user.failed_login_count = (user.failed_login_count or 0) + 1
        user.last_failed_at = now

        if user.failed_login_count >= LOCKOUT_THRESHOLD:
            user.locked_until = now + timedelta(minutes=LOCKOUT_DURATION_MINUTES)
            logger.warning("Locked account %s after %d failed logins", user.id, user.failed_login_count)

        await db.commit()
        raise unauthorized("Invalid email or password")

    # Successful login - reset failed count, clear lockout, and record timestamp
    user.failed_login_count = 0
    user.locked_until = None
    user.last_successful_at = now
    await db.commit()

    return _auth_response(user)


@router.patch(
    "/change-password",
    response_model=StatusResponse,
    status_code=status.HTTP_200_OK,
)
async def change_password(
    data: ChangePasswordRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> StatusResponse:
    """Change the caller's password after verifying the current one."""
    if not verify_password(data.current_password, user.password_hash):
        raise unauthorized("Current password is incorrect")

    user.password_hash = hash_password(data.new_password)
    await db.commit()
    return StatusResponse(message="Password changed successfully")
