"""Topic suggestion schemas."""

from pydantic import BaseModel, field_validator

from app.models.topic_suggestion import TopicStatus
from app.schemas.common import IdStr, ORMModel, Timestamp


class CreateTopicSuggestionRequest(BaseModel):
    topic: str
    description: str | None = None

    @field_validator("topic")
    @classmethod
    def validate_topic(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Topic cannot be empty")
        if len(v) > 200:
            raise ValueError("Topic must be 200 characters or less")
        return v


class UpdateTopicStatusRequest(BaseModel):
    status: TopicStatus


class SuggesterSummary(ORMModel):
    id: IdStr
    username: str
    full_name: str | None
    email: str


class TopicSuggestionResponse(ORMModel):
    id: IdStr
    topic: str
    description: str | None
    status: str
    suggested_by: IdStr
    user: SuggesterSummary | None
    created_at: Timestamp
    updated_at: Timestamp
