"""Exam preparation service for downloadable resources and videos."""

import logging
from typing import Any
from uuid import UUID

from pydantic import BaseModel
from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import bad_request, not_found
from app.models.prep import ExamType, PrepLanguage, PrepLevel, PrepResource, PrepVideo
from app.schemas.prep import (
    CreatePrepResourceRequest,
    CreatePrepVideoRequest,
    PrepResourceResponse,
    PrepVideoResponse,
)

logger = logging.getLogger(__name__)

ENUM_FIELDS = {"exam_type", "language", "level"}
NON_NULLABLE = {"title", "type", "exam_type", "language", "level", "video_url"}


def _apply_updates(instance: Any, data: BaseModel) -> None:
    for field, value in data.model_dump(exclude_unset=True).items():
        if value is None and field in NON_NULLABLE:
            continue
        if field in ENUM_FIELDS:
            value = value.value
        setattr(instance, field, value)


class PrepService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _get(self, model: type, item_id: UUID) -> Any:
        item = await self.db.get(model, item_id, populate_existing=True)
        if not item:
            label = "Prep video" if model is PrepVideo else "Prep resource"
            raise not_found(f"{label} not found")
        return item

    async def _increment(self, model: type, item_id: UUID, column: str) -> dict[str, Any]:
        await self._get(model, item_id)
        await self.db.execute(
            update(model)
            .where(model.id == item_id)
            .values({column: getattr(model, column) + 1})
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()
        item = await self._get(model, item_id)
        return {"id": str(item_id), "count": getattr(item, column)}

    @staticmethod
    def _filtered(model: type, exam_type, level, language, search, search_columns):
        query = select(model)
        if exam_type:
            query = query.where(model.exam_type == exam_type)
        if level:
            query = query.where(model.level == level)
        if language:
            query = query.where(model.language == language)
        if search and search.strip():
            pattern = f"%{search.strip()}%"
            query = query.where(or_(*(column.ilike(pattern) for column in search_columns)))
        return query.order_by(model.created_at.desc())

    # --- Resources ---

    async def create_resource(self, data: CreatePrepResourceRequest) -> dict[str, Any]:
        if not data.title and not data.title_ar:
            raise bad_request("Either title or title_ar is required")

        resource = PrepResource(
            title=data.title or data.title_ar,
            title_ar=data.title_ar,
            type=data.type or "Study Guide",
            type_ar=data.type_ar,
            exam_type=(data.exam_type or ExamType.GRE).value,
            sections=data.sections or [],
            provider=data.provider,
            language=(data.language or PrepLanguage.EN).value,
            level=(data.level or PrepLevel.INTERMEDIATE).value,
            access=data.access or [],
            file_url=data.file_url or "",
            file_type=data.file_type or "pdf",
            file_size=data.file_size or 0,
            file_size_mb=data.file_size_mb,
            download_url=data.download_url or data.file_url or "",
            is_previewable=True if data.is_previewable is None else data.is_previewable,
            requires_login=bool(data.requires_login),
        )
        self.db.add(resource)
        await self.db.commit()
        await self.db.refresh(resource)
        logger.info("Created prep resource %s", resource.id)
        return PrepResourceResponse.model_validate(resource).model_dump()

    async def list_resources(self, exam_type=None, level=None, language=None, search=None) -> list[dict[str, Any]]:
        query = self._filtered(
            PrepResource, exam_type, level, language, search, (PrepResource.title, PrepResource.title_ar)
        )
        result = await self.db.execute(query)
        return [PrepResourceResponse.model_validate(r).model_dump() for r in result.scalars().all()]

    async def get_resource(self, resource_id: UUID) -> dict[str, Any]:
        return PrepResourceResponse.model_validate(await self._get(PrepResource, resource_id)).model_dump()

    async def update_resource(self, resource_id: UUID, data: BaseModel) -> dict[str, Any]:
        resource = await self._get(PrepResource, resource_id)
        _apply_updates(resource, data)
        await self.db.commit()
        await self.db.refresh(resource)
        return PrepResourceResponse.model_validate(resource).model_dump()

    async def delete_resource(self, resource_id: UUID) -> None:
        await self.db.delete(await self._get(PrepResource, resource_id))
        await self.db.commit()

    async def record_resource_download(self, resource_id: UUID) -> dict[str, Any]:
        return await self._increment(PrepResource, resource_id, "downloads")

    async def record_resource_view(self, resource_id: UUID) -> dict[str, Any]:
        return await self._increment(PrepResource, resource_id, "views")

    # --- Videos ---

    async def create_video(self, data: CreatePrepVideoRequest) -> dict[str, Any]:
        if not data.title and not data.title_ar:
            raise bad_request("Either title or title_ar is required")
        if not data.instructor and not data.instructor_ar:
            raise bad_request("Either instructor or instructor_ar is required")

        video = PrepVideo(
            title=data.title or data.title_ar,
            title_ar=data.title_ar,
            instructor=data.instructor or data.instructor_ar,
            instructor_ar=data.instructor_ar,
            exam_type=(data.exam_type or ExamType.GRE).value,
            sections=data.sections or [],
            provider=data.provider,
            language=(data.language or PrepLanguage.EN).value,
            level=(data.level or PrepLevel.INTERMEDIATE).value,
            access=data.access or [],
            video_url=data.video_url or "",
            embed_url=data.embed_url,
            video_type=data.video_type or "mp4",
            duration=data.duration or "0:00",
            duration_seconds=data.duration_seconds or 0,
            duration_min=data.duration_min or 0,
            thumbnail_url=data.thumbnail_url,
            captions_url=data.captions_url,
        )
        self.db.add(video)
        await self.db.commit()
        await self.db.refresh(video)
        logger.info("Created prep video %s", video.id)
        return PrepVideoResponse.model_validate(video).model_dump()

    async def list_videos(self, exam_type=None, level=None, language=None, search=None) -> list[dict[str, Any]]:
        query = self._filtered(
            PrepVideo,
            exam_type,
            level,
            language,
            search,
            (PrepVideo.title, PrepVideo.title_ar, PrepVideo.instructor),
        )
        result = await self.db.execute(query)
        return [PrepVideoResponse.model_validate(v).model_dump() for v in result.scalars().all()]

    async def get_video(self, video_id: UUID) -> dict[str, Any]:
        return PrepVideoResponse.model_validate(await self._get(PrepVideo, video_id)).model_dump()

    async def update_video(self, video_id: UUID, data: BaseModel) -> dict[str, Any]:
        video = await self._get(PrepVideo, video_id)
        _apply_updates(video, data)
        await self.db.commit()
        await self.db.refresh(video)
        return PrepVideoResponse.model_validate(video).model_dump()

    async def delete_video(self, video_id: UUID) -> None:
        await self.db.delete(await self._get(PrepVideo, video_id))
        await self.db.commit()

    async def record_video_view(self, video_id: UUID) -> dict[str, Any]:
        return await self._increment(PrepVideo, video_id, "views")
