"""Question and answer schemas."""

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from app.schemas.common import AuthorSummary, Timestamp


class CreateQuestionRequest(BaseModel):
    """Request to ask a question."""

    title: str = Field(min_length=15, max_length=300)
    content: str = Field(min_length=30, max_length=50000)
    category: str | None = None
    tags: list[str] = []

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: list[str]) -> list[str]:
        return [t.strip() for t in v if t and t.strip()]


class CreateAnswerRequest(BaseModel):
    content: str = Field(min_length=30, max_length=50000)


class VoteRequest(BaseModel):
    value: Literal[1, -1]


class VoteResponse(BaseModel):
    """Vote state after a toggle, recomputed from stored votes."""

    voted: bool
    value: int
    vote_score: int
    user_vote: int


class AnswerResponse(BaseModel):
    id: str
    question_id: str
    content: str
    is_accepted: bool
    author: AuthorSummary | None
    vote_score: int
    user_vote: int
    created_at: Timestamp
    updated_at: Timestamp


class QuestionResponse(BaseModel):
    id: str
    title: str
    content: str
    category: str | None
    tags: list[str]
    views: int
    is_resolved: bool
    author: AuthorSummary | None
    answers_count: int
    vote_score: int
    user_vote: int
    has_accepted_answer: bool
    last_activity_at: Timestamp
    created_at: Timestamp
    updated_at: Timestamp


class QuestionDetailResponse(QuestionResponse):
    answers: list[AnswerResponse]


class AcceptAnswerResponse(BaseModel):
    accepted: bool
    message: str
