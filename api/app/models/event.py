"""Public event model managed from the admin console."""

import enum
import uuid

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, String, Text, func, text
from sqlalchemy.orm import relationship

from app.database import Base
from app.models.types import GUID, utcnow


class EventType(str, enum.Enum):
    CONFERENCE = "CONFERENCE"
    WORKSHOP = "WORKSHOP"
    SEMINAR = "SEMINAR"
    WEBINAR = "WEBINAR"
    DEADLINE = "DEADLINE"
    OTHER = "OTHER"


class Event(Base):
    __tablename__ = "events"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    title = Column(Text, nullable=False)
    title_ar = Column(Text)
    description = Column(Text)
    description_ar = Column(Text)
    type = Column(String(20), nullable=False, default=EventType.OTHER.value, server_default="OTHER")
    start_date = Column(DateTime(timezone=True), nullable=False)
    end_date = Column(DateTime(timezone=True))
    location = Column(Text)
    location_ar = Column(Text)
    time = Column(String(50))
    image_url = Column(Text)
    is_active = Column(Boolean, nullable=False, default=True, server_default=text("true"))
    created_by = Column(GUID, ForeignKey("users.id", ondelete="SET NULL"))
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, server_default=func.now())

    __table_args__ = (Index("idx_events_start", start_date),)

    creator = relationship("User", foreign_keys=[created_by])
