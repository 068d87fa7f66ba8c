"""Notification and message side-effects that fail must not break the triggering action."""

import logging
from uuid import uuid4

from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.message import Message
from app.models.notification import Notification, NotificationType
from app.services.messages import MessageService
from app.services.notifications import NotificationService


async def _count(db_session: AsyncSession, column) -> int:
    return await db_session.scalar(select(func.count(column)))


class TestFailedNotification:
    """A notification addressed to a missing user fails its foreign key."""

    async def test_like_succeeds_and_error_is_logged(
        self,
        async_client: AsyncClient,
        db_session: AsyncSession,
        test_user: dict,
        second_user: dict,
        auth_headers,
        monkeypatch,
        caplog,
    ):
        response = await async_client.post(
            "/api/v1/posts",
            json={"title": "Seminar notes", "content": "Notes from the weekly seminar."},
            headers=auth_headers(test_user),
        )
        post_id = response.json()["id"]

        original = NotificationService.create_notification

        async def to_missing_user(self, user_id, *args, **kwargs):
            return await original(self, uuid4(), *args, **kwargs)

        monkeypatch.setattr(NotificationService, "create_notification", to_missing_user)

        with caplog.at_level(logging.ERROR, logger="app.services.notifications"):
            response = await async_client.post(
                f"/api/v1/posts/{post_id}/like", headers=auth_headers(second_user)
            )

        assert response.status_code == 200
        assert response.json() == {"liked": True, "likes_count": 1}
        assert await _count(db_session, Notification.id) == 0
        assert "Failed to create LIKE notification" in caplog.text

    async def test_service_returns_none(self, db_session: AsyncSession, caplog):
        service = NotificationService(db_session)
        with caplog.at_level(logging.ERROR, logger="app.services.notifications"):
            result = await service.notify(uuid4(), NotificationType.SYSTEM, "Orphan")

        assert result is None
        assert await _count(db_session, Notification.id) == 0
        assert caplog.records[-1].levelno == logging.ERROR


class TestFailedMessageDelivery:
    """An application still goes through when the owner's message cannot be stored."""

    async def test_apply_succeeds_without_message(
        self,
        async_client: AsyncClient,
        db_session: AsyncSession,
        test_user: dict,
        second_user: dict,
        auth_headers,
        monkeypatch,
        caplog,
    ):
        response = await async_client.post(
            "/api/v1/collaborations",
            json={"title": "Water quality survey", "description": "Sampling wells across the West Bank."},
            headers=auth_headers(test_user),
        )
        collaboration_id = response.json()["id"]

        original = MessageService._stage

        def to_missing_user(self, sender, recipient_id, content, **kwargs):
            return original(self, sender, uuid4(), content, **kwargs)

        monkeypatch.setattr(MessageService, "_stage", to_missing_user)

        with caplog.at_level(logging.ERROR, logger="app.services.messages"):
            response = await async_client.post(
                f"/api/v1/collaborations/{collaboration_id}/apply",
                json={
                    "full_name": "Second User",
                    "institution": "Birzeit University",
                    "email": "second@example.com",
                    "field": "Environmental chemistry",
                    "cover_message": "I run the chemistry lab's water tests.",
                },
                headers=auth_headers(second_user),
            )

        assert response.status_code == 201
        assert response.json()["status"] == "PENDING"
        assert await _count(db_session, Message.id) == 0
        assert await _count(db_session, Notification.id) == 1
        assert "Failed to deliver message" in caplog.text
