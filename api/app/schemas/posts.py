"""Post and comment schemas."""

from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from app.schemas.common import AuthorSummary, Timestamp


def _clean_tags(v: list[str] | None) -> list[str] | None:
    if v is None:
        return v
    return [t.strip() for t in v if t and t.strip()]


class CreatePostRequest(BaseModel):
    """Request to create a post."""

    title: str = Field(min_length=1, max_length=300)
    content: str = Field(min_length=1, max_length=50000)
    category: str | None = None
    tags: list[str] = []
    image_urls: list[str] = []
    file_urls: list[str] = []
    is_anonymous: bool = False

    @field_validator("title", "content")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Field cannot be empty")
        return v

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: list[str]) -> list[str]:
        return _clean_tags(v)


class UpdatePostRequest(BaseModel):
    """Partial post update; omitted fields are left unchanged."""

    title: str | None = Field(default=None, min_length=1, max_length=300)
    content: str | None = Field(default=None, min_length=1, max_length=50000)
    category: str | None = None
    tags: list[str] | None = None
    image_urls: list[str] | None = None
    file_urls: list[str] | None = None
    is_anonymous: bool | None = None

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: list[str] | None) -> list[str] | None:
        return _clean_tags(v)


class CommentRequest(BaseModel):
    """Request to add a comment or a reply."""

    content: str = Field(min_length=1, max_length=10000)
    parent_id: UUID | None = None

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Comment cannot be empty")
        return v


class CommentResponse(BaseModel):
    id: str
    post_id: str
    parent_id: str | None
    content: str
    author: AuthorSummary | None
    likes_count: int
    is_liked: bool
    created_at: Timestamp
    replies: list["CommentResponse"] = []


class PostResponse(BaseModel):
    id: str
    title: str
    content: str
    category: str | None
    tags: list[str]
    image_urls: list[str]
    file_urls: list[str]
    is_anonymous: bool
    author_id: str | None
    author: AuthorSummary | None
    views: int
    shares: int
    archived: bool
    moderation_status: str
    likes_count: int
    comments_count: int
    is_liked: bool
    is_saved: bool
    created_at: Timestamp
    updated_at: Timestamp


class PostDetailResponse(PostResponse):
    comments: list[CommentResponse]


class LikeToggleResponse(BaseModel):
    liked: bool
    likes_count: int


class SaveToggleResponse(BaseModel):
    saved: bool


class ArchiveToggleResponse(BaseModel):
    archived: bool
