"""Notification service used by the notification routes and as a side-effect by other modules."""

import logging
from datetime import timedelta
from typing import Any
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import not_found
from app.models.notification import Notification, NotificationType
from app.models.types import utcnow
from app.models.user import User
from app.schemas.notifications import NotificationResponse

logger = logging.getLogger(__name__)

# Notifications older than this are purged when the owner lists them
RETENTION_DAYS = 7


class NotificationService:
    """Service for creating and reading user notifications."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_notification(
        self,
        user_id: UUID,
        type: NotificationType,
        title: str,
        message: str | None = None,
        actor: User | None = None,
        target_type: str | None = None,
        target_id: str | None = None,
        link: str | None = None,
        payload: dict[str, Any] | None = None,
    ) -> Notification:
        """Stage a notification in the current transaction."""
        notification = Notification(
            user_id=user_id,
            type=type.value,
            title=title,
            message=message,
            actor_id=actor.id if actor else None,
            actor_name=(actor.full_name or actor.username) if actor else None,
            actor_avatar=actor.avatar_url if actor else None,
            target_type=target_type,
            target_id=target_id,
            link=link,
            payload=payload or {},
        )
        self.db.add(notification)
        return notification

    async def notify(self, user_id: UUID, type: NotificationType, title: str, **kwargs: Any) -> Notification | None:
        """
        Create and commit a notification as a side-effect of another action.

        Delivery failures are logged and swallowed; the triggering action has
        already been committed by the caller.
        """
        try:
            async with self.db.begin_nested():
                notification = await self.create_notification(user_id, type, title, **kwargs)
        except SQLAlchemyError:
            logger.exception("Failed to create %s notification for user %s", type.value, user_id)
            return None
        await self.db.commit()
        return notification

    async def list_notifications(self, user: User, unread_only: bool = False) -> list[dict]:
        cutoff = utcnow() - timedelta(days=RETENTION_DAYS)
        await self.db.execute(
            delete(Notification)
            .where(Notification.user_id == user.id)
            .where(Notification.created_at < cutoff)
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()

        query = select(Notification).where(Notification.user_id == user.id)
        if unread_only:
            query = query.where(Notification.is_read.is_(False))
        result = await self.db.execute(
            query.order_by(Notification.created_at.desc()).execution_options(populate_existing=True)
        )
        return [NotificationResponse.model_validate(n).model_dump() for n in result.scalars().all()]

    async def unread_count(self, user: User) -> int:
        result = await self.db.execute(
            select(func.count(Notification.id))
            .where(Notification.user_id == user.id)
            .where(Notification.is_read.is_(False))
        )
        return result.scalar_one()

    async def _get_own(self, user: User, notification_id: UUID) -> Notification:
        result = await self.db.execute(
            select(Notification).where(Notification.id == notification_id).where(Notification.user_id == user.id)
        )
        notification = result.scalar_one_or_none()
        if not notification:
            raise not_found("Notification not found")
        return notification

    async def mark_read(self, user: User, notification_id: UUID) -> dict:
        notification = await self._get_own(user, notification_id)
        notification.is_read = True
        await self.db.commit()
        return NotificationResponse.model_validate(notification).model_dump()

    async def mark_all_read(self, user: User) -> int:
        result = await self.db.execute(
            update(Notification)
            .where(Notification.user_id == user.id)
            .where(Notification.is_read.is_(False))
            .values(is_read=True)
        )
        await self.db.commit()
        return result.rowcount or 0

    async def delete_notification(self, user: User, notification_id: UUID) -> None:
        notification = await self._get_own(user, notification_id)
        await self.db.delete(notification)
        await self.db.commit()
