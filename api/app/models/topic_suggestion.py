"""Topic suggestion model."""

import enum
import uuid

from sqlalchemy import Column, DateTime, ForeignKey, String, Text, func
from sqlalchemy.orm import relationship

from app.database import Base
from app.models.types import GUID, utcnow


class TopicStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class TopicSuggestion(Base):
    __tablename__ = "topic_suggestions"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    suggested_by = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    topic = Column(Text, nullable=False)
    description = Column(Text)
    status = Column(String(20), nullable=False, default=TopicStatus.PENDING.value, server_default="PENDING")
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, server_default=func.now())

    user = relationship("User", foreign_keys=[suggested_by])
