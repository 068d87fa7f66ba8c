"""Content report model."""

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
from sqlalchemy.orm import relationship

from app.database import Base
from app.models.types import GUID, utcnow


class ReportTargetType(str, enum.Enum):
    POST = "post"
    COMMENT = "comment"
    QUESTION = "question"
    COLLABORATION = "collaboration"


class ReportType(str, enum.Enum):
    SPAM = "SPAM"
    HARASSMENT = "HARASSMENT"
    INAPPROPRIATE = "INAPPROPRIATE"
    MISINFORMATION = "MISINFORMATION"
    COPYRIGHT = "COPYRIGHT"
    OTHER = "OTHER"


class ReportStatus(str, enum.Enum):
    PENDING = "PENDING"
    RESOLVED = "RESOLVED"
    DISMISSED = "DISMISSED"


class Report(Base):
    """A user's report against a piece of content."""

    __tablename__ = "reports"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    reporter_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    target_type = Column(String(30), nullable=False)
    target_id = Column(String(64), nullable=False)
    type = Column(String(30), nullable=False, default=ReportType.OTHER.value)
    reason = Column(Text, nullable=False)
    description = Column(Text)
    status = Column(String(20), nullable=False, default=ReportStatus.PENDING.value, server_default="PENDING")
    is_resolved = Column(Boolean, nullable=False, default=False, server_default=text("false"))
    resolved_at = Column(DateTime(timezone=True))
    resolved_by = Column(GUID, ForeignKey("users.id", ondelete="SET NULL"))
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())

    __table_args__ = (Index("idx_reports_target", target_type, target_id),)

    reporter = relationship("User", foreign_keys=[reporter_id])
