"""Exam preparation resources and videos."""

import enum
import uuid

from sqlalchemy import Boolean, Column, DateTime, Float, Index, Integer, String, Text, func, text

from app.database import Base
from app.models.types import GUID, JSONType, utcnow


class ExamType(str, enum.Enum):
    GRE = "gre"
    TOEFL = "toefl"
    IELTS = "ielts"
    SAT = "sat"
    GMAT = "gmat"


class PrepLevel(str, enum.Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class PrepLanguage(str, enum.Enum):
    EN = "en"
    AR = "ar"


class PrepResource(Base):
    __tablename__ = "prep_resources"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    title = Column(Text, nullable=False)
    title_ar = Column(Text)
    type = Column(String(50), nullable=False)
    type_ar = Column(Text)
    exam_type = Column(String(10), nullable=False)
    sections = Column(JSONType, default=list)
    provider = Column(Text)
    language = Column(String(5), nullable=False, default=PrepLanguage.EN.value)
    level = Column(String(20), nullable=False, default=PrepLevel.BEGINNER.value)
    access = Column(JSONType, default=list)
    file_url = Column(Text)
    file_type = Column(String(50))
    file_size = Column(Integer)
    file_size_mb = Column(Float)
    download_url = Column(Text)
    is_previewable = Column(Boolean, nullable=False, default=True, server_default=text("true"))
    requires_login = Column(Boolean, nullable=False, default=False, server_default=text("false"))
    downloads = Column(Integer, nullable=False, default=0, server_default=text("0"))
    views = Column(Integer, nullable=False, default=0, server_default=text("0"))
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, server_default=func.now())

    __table_args__ = (Index("idx_prep_resources_exam", exam_type),)


class PrepVideo(Base):
    __tablename__ = "prep_videos"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    title = Column(Text, nullable=False)
    title_ar = Column(Text)
    instructor = Column(Text)
    instructor_ar = Column(Text)
    exam_type = Column(String(10), nullable=False)
    sections = Column(JSONType, default=list)
    provider = Column(Text)
    language = Column(String(5), nullable=False, default=PrepLanguage.EN.value)
    level = Column(String(20), nullable=False, default=PrepLevel.BEGINNER.value)
    access = Column(JSONType, default=list)
    video_url = Column(Text, nullable=False)
    embed_url = Column(Text)
    video_type = Column(String(20))
    duration = Column(String(20))
    duration_seconds = Column(Integer)
    duration_min = Column(Integer)
    thumbnail_url = Column(Text)
    captions_url = Column(Text)
    views = Column(Integer, nullable=False, default=0, server_default=text("0"))
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, server_default=func.now())

    __table_args__ = (Index("idx_prep_videos_exam", exam_type),)
