"""Questions router for Q&A, votes and accepted answers."""

from typing import Literal
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_user, get_optional_user
from app.database import get_db
from app.models.user import User
from app.schemas.common import StatusResponse
from app.schemas.questions import (
    AcceptAnswerResponse,
    AnswerResponse,
    CreateAnswerRequest,
    CreateQuestionRequest,
    QuestionDetailResponse,
    QuestionResponse,
    VoteRequest,
    VoteResponse,
)
from app.services.questions import QuestionService

router = APIRouter(prefix="/api/v1/questions", tags=["Questions"])


def get_question_service(db: AsyncSession = Depends(get_db)) -> QuestionService:
    return QuestionService(db)


@router.post("", response_model=QuestionResponse, status_code=status.HTTP_201_CREATED)
async def create_question(
    data: CreateQuestionRequest,
    user: User = Depends(get_current_user),
    service: QuestionService = Depends(get_question_service),
):
    return await service.create_question(user, data)


@router.get("", response_model=list[QuestionResponse])
async def list_questions(
    sort_by: Literal["newest", "active", "votes", "views", "unanswered"] = Query(default="newest"),
    search: str | None = Query(default=None),
    tag: str | None = Query(default=None),
    category: str | None = Query(default=None),
    user: User | None = Depends(get_optional_user),
    service: QuestionService = Depends(get_question_service),
):
    """
    List questions.

    `unanswered` keeps only questions without answers; `active` orders by the latest answer.
    """
    return await service.list_questions(user, sort_by=sort_by, search=search, tag=tag, category=category)


@router.post("/answers/{answer_id}/vote", response_model=VoteResponse)
async def vote_answer(
    answer_id: UUID,
    data: VoteRequest,
    user: User = Depends(get_current_user),
    service: QuestionService = Depends(get_question_service),
):
    return await service.vote_answer(answer_id, user, data.value)


@router.post("/answers/{answer_id}/accept", response_model=AcceptAnswerResponse)
async def accept_answer(
    answer_id: UUID,
    user: User = Depends(get_current_user),
    service: QuestionService = Depends(get_question_service),
):
    return await service.accept_answer(answer_id, user)


@router.delete("/answers/{answer_id}", response_model=StatusResponse)
async def delete_answer(
    answer_id: UUID,
    user: User = Depends(get_current_user),
    service: QuestionService = Depends(get_question_service),
):
    await service.delete_answer(answer_id, user)
    return StatusResponse(message="Answer deleted")


@router.get("/{question_id}", response_model=QuestionDetailResponse)
async def get_question(
    question_id: UUID,
    user: User | None = Depends(get_optional_user),
    service: QuestionService = Depends(get_question_service),
):
    return await service.get_question(question_id, user)


@router.get("/{question_id}/related", response_model=list[QuestionResponse])
async def related_questions(
    question_id: UUID,
    service: QuestionService = Depends(get_question_service),
):
    return await service.related_questions(question_id)


@router.post("/{question_id}/answers", response_model=AnswerResponse, status_code=status.HTTP_201_CREATED)
async def create_answer(
    question_id: UUID,
    data: CreateAnswerRequest,
    user: User = Depends(get_current_user),
    service: QuestionService = Depends(get_question_service),
):
    return await service.create_answer(question_id, user, data.content)


@router.post("/{question_id}/vote", response_model=VoteResponse)
async def vote_question(
    question_id: UUID,
    data: VoteRequest,
    user: User = Depends(get_current_user),
    service: QuestionService = Depends(get_question_service),
):
    return await service.vote_question(question_id, user, data.value)


@router.delete("/{question_id}", response_model=StatusResponse)
async def delete_question(
    question_id: UUID,
    user: User = Depends(get_current_user),
    service: QuestionService = Depends(get_question_service),
):
    await service.delete_question(question_id, user)
    return StatusResponse(message="Question deleted")
