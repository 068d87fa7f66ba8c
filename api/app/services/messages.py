"""Direct messaging service."""

import logging
from collections import Counter
from typing import Any
from uuid import UUID

from sqlalchemy import and_, delete, func, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.errors import not_found
from app.models.message import Message, MessageReaction
from app.models.notification import NotificationType
from app.models.user import User
from app.schemas.common import author_summary
from app.services.notifications import NotificationService

logger = logging.getLogger(__name__)

MESSAGE_LOAD_OPTIONS = (
    selectinload(Message.sender),
    selectinload(Message.reply_to).selectinload(Message.sender),
    selectinload(Message.reactions).selectinload(MessageReaction.user),
)


def _between(user_id: UUID, other_id: UUID):
    return or_(
        and_(Message.sender_id == user_id, Message.recipient_id == other_id),
        and_(Message.sender_id == other_id, Message.recipient_id == user_id),
    )


def format_message(message: Message) -> dict[str, Any]:
    reply_to = None
    if message.reply_to is not None:
        reply_sender = message.reply_to.sender
        reply_to = {
            "id": str(message.reply_to.id),
            "content": message.reply_to.content,
            "sender_name": (reply_sender.full_name or reply_sender.username) if reply_sender else None,
        }
    return {
        "id": str(message.id),
        "sender_id": str(message.sender_id) if message.sender_id else None,
        "recipient_id": str(message.recipient_id),
        "sender": author_summary(message.sender),
        "content": message.content,
        "is_read": message.is_read,
        "context_type": message.context_type,
        "context_id": message.context_id,
        "context_data": message.context_data,
        "attachments": message.attachments or [],
        "reply_to": reply_to,
        "reactions": [
            {
                "id": str(r.id),
                "emoji": r.emoji,
                "user_id": str(r.user_id),
                "user_name": (r.user.full_name or r.user.username) if r.user else None,
            }
            for r in message.reactions
        ],
        "created_at": message.created_at,
    }


class MessageService:
    """Service for direct messages between users."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.notifications = NotificationService(db)

    async def _load(self, message_id: UUID) -> Message:
        result = await self.db.execute(
            select(Message)
            .options(*MESSAGE_LOAD_OPTIONS)
            .where(Message.id == message_id)
            .execution_options(populate_existing=True)
        )
        message = result.scalar_one_or_none()
        if not message:
            raise not_found("Message not found")
        return message

    def _stage(self, sender: User | None, recipient_id: UUID, content: str, **kwargs: Any) -> Message:
        message = Message(
            sender_id=sender.id if sender else None,
            recipient_id=recipient_id,
            content=content,
            context_type=kwargs.get("context_type"),
            context_id=kwargs.get("context_id"),
            context_data=kwargs.get("context_data"),
            reply_to_id=kwargs.get("reply_to_id"),
            attachments=kwargs.get("attachments") or [],
        )
        self.db.add(message)
        return message

    async def _notify_recipient(self, sender: User, message: Message) -> None:
        sender_name = sender.full_name or sender.username
        await self.notifications.notify(
            message.recipient_id,
            NotificationType.MESSAGE,
            "New Message",
            message=f"{sender_name} sent you a message",
            actor=sender,
            target_type="message",
            target_id=str(message.id),
            link=f"/dashboard/messages?userId={sender.id}",
            payload={
                "conversation_user_id": str(sender.id),
                "context_type": message.context_type,
                "context_id": message.context_id,
            },
        )

    async def send_message(
        self,
        sender: User | None,
        recipient_id: UUID,
        content: str,
        context_type: str | None = None,
        context_id: str | None = None,
        context_data: dict[str, Any] | None = None,
        reply_to_id: UUID | None = None,
        attachments: list[dict[str, Any]] | None = None,
    ) -> dict[str, Any]:
        """
        Send a message and notify the recipient.

        A None sender marks a system message; those do not raise a notification.
        """
        recipient = await self.db.get(User, recipient_id)
        if not recipient:
            raise not_found("Recipient not found")
        if reply_to_id is not None and not await self.db.get(Message, reply_to_id):
            raise not_found("Message being replied to not found")

        message = self._stage(
            sender,
            recipient_id,
            content,
            context_type=context_type,
            context_id=context_id,
            context_data=context_data,
            reply_to_id=reply_to_id,
            attachments=attachments,
        )
        await self.db.commit()

        if sender is not None:
            await self._notify_recipient(sender, message)
        return format_message(await self._load(message.id))

    async def deliver(self, sender: User | None, recipient_id: UUID, content: str, **kwargs: Any) -> Message | None:
        """Send a message as a side-effect of another action; failures are logged and swallowed."""
        try:
            async with self.db.begin_nested():
                message = self._stage(sender, recipient_id, content, **kwargs)
        except SQLAlchemyError:
            logger.exception("Failed to deliver message to user %s", recipient_id)
            return None
        await self.db.commit()

        if sender is not None:
            await self._notify_recipient(sender, message)
        return message

    async def get_conversations(self, user: User) -> list[dict[str, Any]]:
        result = await self.db.execute(
            select(Message)
            .options(*MESSAGE_LOAD_OPTIONS, selectinload(Message.recipient))
            .where(or_(Message.sender_id == user.id, Message.recipient_id == user.id))
            .order_by(Message.created_at.desc())
            .execution_options(populate_existing=True)
        )
        conversations: dict[UUID | None, dict[str, Any]] = {}
        for message in result.scalars().all():
            if message.sender_id == user.id:
                other_id, other = message.recipient_id, message.recipient
            else:
                other_id, other = message.sender_id, message.sender

            # Messages arrive newest first, so the first one seen per counterpart is the latest
            entry = conversations.get(other_id)
            if entry is None:
                entry = {
                    "user_id": str(other_id) if other_id else None,
                    "user": author_summary(other),
                    "last_message": format_message(message),
                    "unread_count": 0,
                }
                conversations[other_id] = entry
            if message.recipient_id == user.id and not message.is_read:
                entry["unread_count"] += 1

        return list(conversations.values())

    async def get_conversation(self, user: User, other_user_id: UUID) -> list[dict[str, Any]]:
        result = await self.db.execute(
            select(Message)
            .options(*MESSAGE_LOAD_OPTIONS)
            .where(_between(user.id, other_user_id))
            .order_by(Message.created_at.asc())
            .execution_options(populate_existing=True)
        )
        return [format_message(m) for m in result.scalars().all()]

    async def mark_conversation_read(self, user: User, other_user_id: UUID) -> None:
        await self.db.execute(
            update(Message)
            .where(Message.sender_id == other_user_id)
            .where(Message.recipient_id == user.id)
            .where(Message.is_read.is_(False))
            .values(is_read=True)
        )
        await self.db.commit()

    async def unread_count(self, user: User) -> int:
        result = await self.db.execute(
            select(func.count(Message.id))
            .where(Message.recipient_id == user.id)
            .where(Message.is_read.is_(False))
        )
        return result.scalar_one()

    async def toggle_reaction(self, user: User, message_id: UUID, emoji: str) -> dict[str, str]:
        message = await self.db.get(Message, message_id)
        if not message:
            raise not_found("Message not found")

        result = await self.db.execute(
            select(MessageReaction)
            .where(MessageReaction.message_id == message_id)
            .where(MessageReaction.user_id == user.id)
            .where(MessageReaction.emoji == emoji)
        )
        existing = result.scalar_one_or_none()
        if existing:
            await self.db.delete(existing)
            action = "removed"
        else:
            self.db.add(MessageReaction(message_id=message_id, user_id=user.id, emoji=emoji))
            action = "added"
        await self.db.commit()
        return {"action": action, "emoji": emoji}

    async def get_reactions(self, message_id: UUID) -> list[dict[str, Any]]:
        result = await self.db.execute(
            select(MessageReaction.emoji)
            .where(MessageReaction.message_id == message_id)
            .order_by(MessageReaction.created_at)
        )
        counts = Counter(result.scalars().all())
        return [{"emoji": emoji, "count": count} for emoji, count in counts.items()]

    async def delete_conversation(self, user: User, other_user_id: UUID) -> int:
        result = await self.db.execute(
            delete(Message).where(_between(user.id, other_user_id)).execution_options(synchronize_session="fetch")
        )
        await self.db.commit()
        return result.rowcount or 0
