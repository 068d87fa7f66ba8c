"""Library resource schemas."""

from pydantic import BaseModel

from app.models.library import LibraryLanguage, LibraryResourceType
from app.schemas.common import IdStr, ORMModel, Timestamp


class LibraryResourceFields(BaseModel):
    title: str | None = None
    title_ar: str | None = None
    author: str | None = None
    author_ar: str | None = None
    institution: str | None = None
    institution_ar: str | None = None
    summary: str | None = None
    summary_ar: str | None = None
    type: LibraryResourceType | None = None
    discipline: str | None = None
    discipline_ar: str | None = None
    language: LibraryLanguage | None = None
    file_url: str | None = None
    file_type: str | None = None
    file_size: int | None = None
    file_size_display: str | None = None
    tags: list[str] | None = None
    year: int | None = None
    is_previewable: bool | None = None
    requires_login: bool | None = None
    preview_url: str | None = None
    video_url: str | None = None
    thumbnail_url: str | None = None
    duration: str | None = None
    duration_seconds: int | None = None


class CreateLibraryResourceRequest(LibraryResourceFields):
    """Either language may supply title, author and summary; the service checks one of each is present."""


class UpdateLibraryResourceRequest(LibraryResourceFields):
    pass


class LibraryResourceResponse(ORMModel):
    id: IdStr
    title: str
    title_ar: str | None
    author: str
    author_ar: str | None
    institution: str | None
    institution_ar: str | None
    summary: str
    summary_ar: str | None
    type: str
    discipline: str
    discipline_ar: str | None
    language: str
    file_url: str | None
    file_type: str | None
    file_size: int | None
    file_size_display: str | None
    tags: list[str] | None
    year: int | None
    is_previewable: bool
    requires_login: bool
    preview_url: str | None
    video_url: str | None
    thumbnail_url: str | None
    duration: str | None
    duration_seconds: int | None
    downloads: int
    views: int
    created_at: Timestamp
    updated_at: Timestamp
