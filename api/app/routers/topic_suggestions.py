"""Topic suggestions router."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_user
from app.database import get_db
from app.models.user import User
from app.schemas.common import StatusResponse
from app.schemas.topics import CreateTopicSuggestionRequest, TopicSuggestionResponse
from app.services.topics import TopicSuggestionService

router = APIRouter(prefix="/api/v1/topic-suggestions", tags=["Topic Suggestions"])


def get_topic_service(db: AsyncSession = Depends(get_db)) -> TopicSuggestionService:
    return TopicSuggestionService(db)


@router.post("", response_model=TopicSuggestionResponse, status_code=status.HTTP_201_CREATED)
async def create_suggestion(
    data: CreateTopicSuggestionRequest,
    user: User = Depends(get_current_user),
    service: TopicSuggestionService = Depends(get_topic_service),
):
    return await service.create(user, data.topic, data.description)


@router.get("/my-suggestions", response_model=list[TopicSuggestionResponse])
async def my_suggestions(
    user: User = Depends(get_current_user),
    service: TopicSuggestionService = Depends(get_topic_service),
):
    return await service.list_suggestions(user=user)


@router.delete("/{topic_id}", response_model=StatusResponse)
async def delete_suggestion(
    topic_id: UUID,
    user: User = Depends(get_current_user),
    service: TopicSuggestionService = Depends(get_topic_service),
):
    await service.delete_own(topic_id, user)
    return StatusResponse(message="Topic suggestion deleted")
