"""Users router for profile endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_user
from app.database import get_db
from app.errors import conflict, not_found
from app.models.user import User
from app.schemas.users import (
    UpdateProfileRequest,
    UserPrivateResponse,
    UserPublicResponse,
    UserSearchItem,
)

router = APIRouter(prefix="/api/v1/users", tags=["Users"])

SEARCH_LIMIT = 20


@router.get(
    "/me",
    response_model=UserPrivateResponse,
    status_code=status.HTTP_200_OK,
)
async def get_current_user_profile(
    user: User = Depends(get_current_user),
) -> UserPrivateResponse:
    """Get the authenticated user's full profile."""
    return UserPrivateResponse.model_validate(user)


@router.patch(
    "/me",
    response_model=UserPrivateResponse,
    status_code=status.HTTP_200_OK,
)
async def update_current_user_profile(
    data: UpdateProfileRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> UserPrivateResponse:
    """
    Update the authenticated user's profile.

    Only fields present in the request body are changed.
    """
    updates = data.model_dump(exclude_unset=True)

    if updates.get("username") and updates["username"].lower() != user.username.lower():
        taken = await db.execute(
            select(User.id).where(func.lower(User.username) == updates["username"].lower())
        )
        if taken.first():
            raise conflict("Username already taken")
    if updates.get("email"):
        updates["email"] = updates["email"].lower()
        if updates["email"] != user.email:
            taken = await db.execute(select(User.id).where(func.lower(User.email) == updates["email"]))
            if taken.first():
                raise conflict("Email already in use")

    for field in ("username", "email"):
        if field in updates and updates[field] is None:
            del updates[field]

    for field, value in updates.items():
        setattr(user, field, value)

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise conflict("Username or email already exists")

    await db.refresh(user)
    return UserPrivateResponse.model_validate(user)


@router.get(
    "/search",
    response_model=list[UserSearchItem],
    status_code=status.HTTP_200_OK,
)
async def search_users(
    q: str = Query(default="", description="Search term"),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> list[UserSearchItem]:
    """Search users by username, name, email or university."""
    term = q.strip()
    if not term:
        return []

    pattern = f"%{term}%"
    result = await db.execute(
        select(User)
        .where(
            or_(
                User.username.ilike(pattern),
                User.full_name.ilike(pattern),
                User.email.ilike(pattern),
                User.university.ilike(pattern),
            )
        )
        .order_by(User.username)
        .limit(SEARCH_LIMIT)
    )
    return [UserSearchItem.model_validate(u) for u in result.scalars().all()]


@router.get(
    "/{user_id}",
    response_model=UserPublicResponse,
    status_code=status.HTTP_200_OK,
)
async def get_user_profile(
    user_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> UserPublicResponse:
    """Get a user's public profile by ID."""
    user = await db.get(User, user_id)
    if not user:
        raise not_found("User not found")
    return UserPublicResponse.model_validate(user)
