"""Notifications router."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_user
from app.database import get_db
from app.models.user import User
from app.schemas.common import StatusResponse
from app.schemas.notifications import NotificationResponse, UnreadCountResponse
from app.services.notifications import NotificationService

router = APIRouter(prefix="/api/v1/notifications", tags=["Notifications"])


def get_notification_service(db: AsyncSession = Depends(get_db)) -> NotificationService:
    return NotificationService(db)


@router.get("", response_model=list[NotificationResponse])
async def list_notifications(
    unread_only: bool = Query(default=False),
    user: User = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    """List the caller's notifications, newest first. Entries older than a week are purged."""
    return await service.list_notifications(user, unread_only=unread_only)


@router.get("/unread-count", response_model=UnreadCountResponse)
async def unread_count(
    user: User = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    return UnreadCountResponse(count=await service.unread_count(user))


@router.patch("/read-all", response_model=StatusResponse)
async def mark_all_read(
    user: User = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    updated = await service.mark_all_read(user)
    return StatusResponse(message=f"Marked {updated} notifications as read")


@router.patch("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(
    notification_id: UUID,
    user: User = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    return await service.mark_read(user, notification_id)


@router.delete("/{notification_id}", response_model=StatusResponse)
async def delete_notification(
    notification_id: UUID,
    user: User = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    await service.delete_notification(user, notification_id)
    return StatusResponse(message="Notification deleted")
