"""Exam preparation resource and video schemas."""

from pydantic import BaseModel

from app.models.prep import ExamType, PrepLanguage, PrepLevel
from app.schemas.common import IdStr, ORMModel, Timestamp


class PrepResourceFields(BaseModel):
    title: str | None = None
    title_ar: str | None = None
    type: str | None = None
    type_ar: str | None = None
    exam_type: ExamType | None = None
    sections: list[str] | None = None
    provider: str | None = None
    language: PrepLanguage | None = None
    level: PrepLevel | None = None
    access: list[str] | None = None
    file_url: str | None = None
    file_type: str | None = None
    file_size: int | None = None
    file_size_mb: float | None = None
    download_url: str | None = None
    is_previewable: bool | None = None
    requires_login: bool | None = None


class CreatePrepResourceRequest(PrepResourceFields):
    pass


class UpdatePrepResourceRequest(PrepResourceFields):
    pass


class PrepResourceResponse(ORMModel):
    id: IdStr
    title: str
    title_ar: str | None
    type: str
    type_ar: str | None
    exam_type: str
    sections: list[str] | None
    provider: str | None
    language: str
    level: str
    access: list[str] | None
    file_url: str | None
    file_type: str | None
    file_size: int | None
    file_size_mb: float | None
    download_url: str | None
    is_previewable: bool
    requires_login: bool
    downloads: int
    views: int
    created_at: Timestamp
    updated_at: Timestamp


class PrepVideoFields(BaseModel):
    title: str | None = None
    title_ar: str | None = None
    instructor: str | None = None
    instructor_ar: str | None = None
    exam_type: ExamType | None = None
    sections: list[str] | None = None
    provider: str | None = None
    language: PrepLanguage | None = None
    level: PrepLevel | None = None
    access: list[str] | None = None
    video_url: str | None = None
    embed_url: str | None = None
    video_type: str | None = None
    duration: str | None = None
    duration_seconds: int | None = None
    duration_min: int | None = None
    thumbnail_url: str | None = None
    captions_url: str | None = None


class CreatePrepVideoRequest(PrepVideoFields):
    pass


class UpdatePrepVideoRequest(PrepVideoFields):
    pass


class PrepVideoResponse(ORMModel):
    id: IdStr
    title: str
    title_ar: str | None
    instructor: str | None
    instructor_ar: str | None
    exam_type: str
    sections: list[str] | None
    provider: str | None
    language: str
    level: str
    access: list[str] | None
    video_url: str
    embed_url: str | None
    video_type: str | None
    duration: str | None
    duration_seconds: int | None
    duration_min: int | None
    thumbnail_url: str | None
    captions_url: str | None
    views: int
    created_at: Timestamp
    updated_at: Timestamp
