"""Direct message schemas."""

from typing import Any
from uuid import UUID

from pydantic import BaseModel, field_validator

from app.schemas.common import AuthorSummary, Timestamp


class SendMessageRequest(BaseModel):
    """Request to send a direct message."""

    recipient_id: UUID
    content: str
    context_type: str | None = None
    context_id: str | None = None
    context_data: dict[str, Any] | None = None
    reply_to_id: UUID | None = None
    attachments: list[dict[str, Any]] | None = None

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        """Validate content length."""
        if not v.strip():
            raise ValueError("Message cannot be empty")
        if len(v) > 10000:
            raise ValueError("Message must be 10000 characters or less")
        return v


class ReactRequest(BaseModel):
    emoji: str

    @field_validator("emoji")
    @classmethod
    def validate_emoji(cls, v: str) -> str:
        v = v.strip()
        if not v or len(v) > 32:
            raise ValueError("Emoji must be 1-32 characters")
        return v


class ReactionResponse(BaseModel):
    id: str
    emoji: str
    user_id: str
    user_name: str | None


class ReplyPreview(BaseModel):
    id: str
    content: str
    sender_name: str | None


class MessageResponse(BaseModel):
    id: str
    sender_id: str | None
    recipient_id: str
    sender: AuthorSummary | None
    content: str
    is_read: bool
    context_type: str | None
    context_id: str | None
    context_data: dict[str, Any] | None
    attachments: list[dict[str, Any]] | None
    reply_to: ReplyPreview | None
    reactions: list[ReactionResponse]
    created_at: Timestamp


class ConversationResponse(BaseModel):
    """One entry per counterpart; system messages have no counterpart user."""

    user_id: str | None
    user: AuthorSummary | None
    last_message: MessageResponse | None
    unread_count: int


class ReactionToggleResponse(BaseModel):
    action: str
    emoji: str


class ReactionCount(BaseModel):
    emoji: str
    count: int
