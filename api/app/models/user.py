"""User account model."""

import enum
import uuid

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Index,
    Integer,
    String,
    Text,
    func,
    text,
)

from app.database import Base
from app.models.types import GUID, JSONType, utcnow


class UserRoleName(str, enum.Enum):
    STUDENT = "STUDENT"
    RESEARCHER = "RESEARCHER"
    PROFESSOR = "PROFESSOR"
    ADMIN = "ADMIN"


class User(Base):
    """User account with academic profile and moderation state."""

    __tablename__ = "users"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    username = Column(String(30), unique=True, nullable=False)
    email = Column(String, unique=True, nullable=False)
    password_hash = Column(Text, nullable=False)
    full_name = Column(Text)
    avatar_url = Column(Text)
    cover_url = Column(Text)
    bio = Column(Text)
    role = Column(String(20), nullable=False, default=UserRoleName.STUDENT.value, server_default="STUDENT")

    # Academic profile
    major = Column(Text)
    university = Column(Text)
    country = Column(Text)
    city = Column(Text)
    academic_position = Column(Text)
    highest_degree = Column(Text)
    fields_of_study = Column(JSONType, default=list)
    skills = Column(JSONType, default=list)
    keywords = Column(JSONType, default=list)
    preferred_languages = Column(JSONType, default=lambda: ["ar", "en"])

    # Contact and links
    phone = Column(Text)
    website = Column(Text)
    linkedin = Column(Text)
    orcid = Column(Text)
    google_scholar = Column(Text)
    research_gate = Column(Text)
    github = Column(Text)
    custom_links = Column(JSONType, default=list)

    # Moderation
    is_verified = Column(Boolean, nullable=False, default=False, server_default=text("false"))
    is_suspended = Column(Boolean, nullable=False, default=False, server_default=text("false"))
    suspended_until = Column(DateTime(timezone=True))
    suspension_reason = Column(Text)
    is_banned = Column(Boolean, nullable=False, default=False, server_default=text("false"))
    banned_until = Column(DateTime(timezone=True))
    ban_reason = Column(Text)
    is_flagged = Column(Boolean, nullable=False, default=False, server_default=text("false"))
    flag_reason = Column(Text)

    # Lockout tracking
    failed_login_count = Column(Integer, nullable=False, default=0, server_default=text("0"))
    last_failed_at = Column(DateTime(timezone=True))
    locked_until = Column(DateTime(timezone=True))
    last_successful_at = Column(DateTime(timezone=True))

    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, server_default=func.now())

    __table_args__ = (
        Index("idx_users_role", role),
        Index("idx_users_created", created_at),
    )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRoleName.ADMIN.value
