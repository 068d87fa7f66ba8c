"""Notification model."""

import enum
import uuid

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    func,
    text,
)

from app.database import Base
from app.models.types import GUID, JSONType, utcnow


class NotificationType(str, enum.Enum):
    LIKE = "LIKE"
    COMMENT = "COMMENT"
    MESSAGE = "MESSAGE"
    COLLAB_REQUEST = "COLLAB_REQUEST"
    COLLAB_UPDATE = "COLLAB_UPDATE"
    SYSTEM = "SYSTEM"


class Notification(Base):
    """User notification model."""

    __tablename__ = "notifications"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    user_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    type = Column(String(30), nullable=False)
    actor_id = Column(GUID, ForeignKey("users.id", ondelete="SET NULL"))
    actor_name = Column(Text)
    actor_avatar = Column(Text)
    target_type = Column(String(50))  # e.g. "post", "comment", "collaboration"
    target_id = Column(String(64))
    title = Column(Text, nullable=False)
    message = Column(Text)
    link = Column(Text)
    payload = Column(JSONType, default=dict)
    is_read = Column(Boolean, nullable=False, default=False, server_default=text("false"))
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())

    __table_args__ = (
        Index("idx_notifications_user", user_id, created_at.desc()),
        Index("idx_notifications_unread", user_id, is_read),
    )
