"""Notification schemas."""

from typing import Any

from pydantic import BaseModel

from app.schemas.common import IdStr, ORMModel, Timestamp


class NotificationResponse(ORMModel):
    id: IdStr
    type: str
    title: str
    message: str | None
    link: str | None
    actor_id: IdStr | None
    actor_name: str | None
    actor_avatar: str | None
    target_type: str | None
    target_id: str | None
    payload: dict[str, Any] | None
    is_read: bool
    created_at: Timestamp


class UnreadCountResponse(BaseModel):
    count: int
