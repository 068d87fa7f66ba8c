"""Direct message models."""

import uuid

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
    func,
    text,
)
from sqlalchemy.orm import relationship

from app.database import Base
from app.models.types import GUID, JSONType, utcnow


class Message(Base):
    """A direct message. System messages have no sender."""

    __tablename__ = "messages"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    sender_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"))
    recipient_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    content = Column(Text, nullable=False)
    is_read = Column(Boolean, nullable=False, default=False, server_default=text("false"))
    context_type = Column(String(50))
    context_id = Column(String(64))
    context_data = Column(JSONType)
    reply_to_id = Column(GUID, ForeignKey("messages.id", ondelete="SET NULL"))
    attachments = Column(JSONType, default=list)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())

    __table_args__ = (
        Index("idx_messages_sender_recipient", sender_id, recipient_id, created_at),
        Index("idx_messages_recipient_unread", recipient_id, is_read),
    )

    sender = relationship("User", foreign_keys=[sender_id])
    recipient = relationship("User", foreign_keys=[recipient_id])
    reply_to = relationship("Message", remote_side=[id])
    reactions = relationship(
        "MessageReaction",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="MessageReaction.created_at",
    )


class MessageReaction(Base):
    __tablename__ = "message_reactions"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    message_id = Column(GUID, ForeignKey("messages.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    emoji = Column(String(32), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())

    __table_args__ = (
        UniqueConstraint("message_id", "user_id", "emoji", name="uq_message_reactions_message_user_emoji"),
    )

    user = relationship("User", foreign_keys=[user_id])
