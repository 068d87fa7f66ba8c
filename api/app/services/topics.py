"""Topic suggestion service shared by the user and admin routes."""

from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.errors import forbidden, not_found
from app.models.topic_suggestion import TopicSuggestion
from app.models.user import User
from app.schemas.topics import TopicSuggestionResponse


def format_topic(topic: TopicSuggestion) -> dict[str, Any]:
    return TopicSuggestionResponse.model_validate(topic).model_dump()


class TopicSuggestionService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _get(self, topic_id: UUID) -> TopicSuggestion:
        result = await self.db.execute(
            select(TopicSuggestion)
            .options(selectinload(TopicSuggestion.user))
            .where(TopicSuggestion.id == topic_id)
            .execution_options(populate_existing=True)
        )
        topic = result.scalar_one_or_none()
        if not topic:
            raise not_found("Topic suggestion not found")
        return topic

    async def create(self, user: User, topic: str, description: str | None) -> dict[str, Any]:
        suggestion = TopicSuggestion(topic=topic, description=description, suggested_by=user.id)
        self.db.add(suggestion)
        await self.db.commit()
        return format_topic(await self._get(suggestion.id))

    async def list_suggestions(self, user: User | None = None, status: str | None = None) -> list[dict[str, Any]]:
        """List suggestions newest first, optionally for one user or one status."""
        query = select(TopicSuggestion).options(selectinload(TopicSuggestion.user))
        if user is not None:
            query = query.where(TopicSuggestion.suggested_by == user.id)
        if status:
            query = query.where(TopicSuggestion.status == status)
        result = await self.db.execute(query.order_by(TopicSuggestion.created_at.desc()))
        return [format_topic(t) for t in result.scalars().all()]

    async def delete_own(self, topic_id: UUID, user: User) -> None:
        topic = await self._get(topic_id)
        if topic.suggested_by != user.id:
            raise forbidden("You can only delete your own suggestions")
        await self.db.delete(topic)
        await self.db.commit()

    async def update_status(self, topic_id: UUID, status: str) -> dict[str, Any]:
        topic = await self._get(topic_id)
        topic.status = status
        await self.db.commit()
        return format_topic(await self._get(topic_id))

    async def delete(self, topic_id: UUID) -> None:
        topic = await self._get(topic_id)
        await self.db.delete(topic)
        await self.db.commit()
