"""Research collaboration models."""

import enum
import uuid

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    UniqueConstraint,
    func,
    text,
)
from sqlalchemy.orm import relationship

from app.database import Base
from app.models.types import GUID, JSONType, utcnow


class CollaborationStatus(str, enum.Enum):
    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class ApplicationStatus(str, enum.Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


collaboration_members = Table(
    "collaboration_members",
    Base.metadata,
    Column("collaboration_id", GUID, ForeignKey("collaborations.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", GUID, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


class Collaboration(Base):
    """A posted research collaboration that users can apply to join."""

    __tablename__ = "collaborations"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    owner_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    institution = Column(Text)
    country = Column(Text)
    city = Column(Text)
    is_remote = Column(Boolean, nullable=False, default=False, server_default=text("false"))
    duration = Column(Text)
    duration_months = Column(Integer)
    deadline = Column(DateTime(timezone=True))
    skills = Column(JSONType, default=list)
    disciplines = Column(JSONType, default=list)
    application_areas = Column(JSONType, default=list)
    collaboration_type = Column(JSONType, default=list)
    degree_level = Column(JSONType, default=list)
    experience_years = Column(Text)
    weekly_commitment = Column(Text)
    work_languages = Column(JSONType, default=list)
    has_funding = Column(Boolean, nullable=False, default=False, server_default=text("false"))
    funding_types = Column(JSONType, default=list)
    methodology = Column(JSONType, default=list)
    data_availability = Column(Text)
    max_members = Column(Integer)
    applicants_count = Column(Integer, nullable=False, default=0, server_default=text("0"))
    status = Column(
        String(20),
        nullable=False,
        default=CollaborationStatus.OPEN.value,
        server_default="OPEN",
    )
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, server_default=func.now())

    __table_args__ = (
        CheckConstraint("max_members IS NULL OR max_members >= 1", name="ck_collaborations_max_members"),
        Index("idx_collaborations_created", created_at.desc()),
    )

    owner = relationship("User", foreign_keys=[owner_id])
    members = relationship("User", secondary=collaboration_members, passive_deletes=True)
    applications = relationship(
        "CollaborationApplication",
        back_populates="collaboration",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="CollaborationApplication.created_at.desc()",
    )

    @property
    def accepted_count(self) -> int:
        return sum(1 for a in self.applications if a.status == ApplicationStatus.ACCEPTED.value)

    @property
    def is_full(self) -> bool:
        return self.max_members is not None and self.accepted_count >= self.max_members


class CollaborationApplication(Base):
    """A user's request to join a collaboration."""

    __tablename__ = "collaboration_applications"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    collaboration_id = Column(GUID, ForeignKey("collaborations.id", ondelete="CASCADE"), nullable=False)
    applicant_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    full_name = Column(Text)
    institution = Column(Text)
    email = Column(Text)
    field = Column(Text)
    cover_letter = Column(Text)
    attachment = Column(Text)
    message = Column(Text)
    motivation = Column(Text)
    skills = Column(JSONType, default=list)
    status = Column(
        String(20),
        nullable=False,
        default=ApplicationStatus.PENDING.value,
        server_default="PENDING",
    )
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, server_default=func.now())

    __table_args__ = (
        UniqueConstraint("collaboration_id", "applicant_id", name="uq_collab_applications_collab_applicant"),
    )

    collaboration = relationship("Collaboration", back_populates="applications")
    applicant = relationship("User", foreign_keys=[applicant_id])
