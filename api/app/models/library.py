"""Library resource model: books, papers, summaries and videos."""

import enum
import uuid

from sqlalchemy import Boolean, Column, DateTime, Index, Integer, String, Text, func, text

from app.database import Base
from app.models.types import GUID, JSONType, utcnow


class LibraryResourceType(str, enum.Enum):
    BOOK = "book"
    PAPER = "paper"
    SUMMARY = "summary"
    VIDEO = "video"


class LibraryLanguage(str, enum.Enum):
    EN = "en"
    AR = "ar"
    OTHER = "other"


class LibraryResource(Base):
    """Bilingual library entry; either language may carry the text fields."""

    __tablename__ = "library_resources"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    title = Column(Text, nullable=False)
    title_ar = Column(Text)
    author = Column(Text, nullable=False)
    author_ar = Column(Text)
    institution = Column(Text)
    institution_ar = Column(Text)
    summary = Column(Text, nullable=False)
    summary_ar = Column(Text)
    discipline = Column(String(100), nullable=False, default="general")
    discipline_ar = Column(Text)
    type = Column(String(20), nullable=False, default=LibraryResourceType.BOOK.value)
    language = Column(String(10), nullable=False, default=LibraryLanguage.EN.value)
    file_url = Column(Text)
    file_type = Column(String(50))
    file_size = Column(Integer)
    file_size_display = Column(String(20))
    tags = Column(JSONType, default=list)
    year = Column(Integer)
    is_previewable = Column(Boolean, nullable=False, default=True, server_default=text("true"))
    requires_login = Column(Boolean, nullable=False, default=False, server_default=text("false"))
    preview_url = Column(Text)
    video_url = Column(Text)
    thumbnail_url = Column(Text)
    duration = Column(String(20))
    duration_seconds = Column(Integer)
    downloads = Column(Integer, nullable=False, default=0, server_default=text("0"))
    views = Column(Integer, nullable=False, default=0, server_default=text("0"))
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, server_default=func.now())

    __table_args__ = (
        Index("idx_library_type", type),
        Index("idx_library_created", created_at.desc()),
    )
