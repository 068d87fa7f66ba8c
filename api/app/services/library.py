"""Library service: bilingual books, papers, summaries and videos."""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import bad_request, not_found
from app.models.library import LibraryLanguage, LibraryResource, LibraryResourceType
from app.models.types import utcnow
from app.schemas.library import (
    CreateLibraryResourceRequest,
    LibraryResourceResponse,
    UpdateLibraryResourceRequest,
)

logger = logging.getLogger(__name__)

# Fields where the English value may be filled from the Arabic one and vice versa
BILINGUAL_REQUIRED = ("title", "author", "summary")


def format_file_size(size: int) -> str:
    """Render a byte count as B, KB, MB or GB with one decimal above bytes."""
    if size < 1024:
        return f"{size} B"
    if size < 1024**2:
        return f"{size / 1024:.1f} KB"
    if size < 1024**3:
        return f"{size / 1024**2:.1f} MB"
    return f"{size / 1024**3:.1f} GB"


def format_resource(resource: LibraryResource) -> dict[str, Any]:
    return LibraryResourceResponse.model_validate(resource).model_dump()


class LibraryService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _get(self, resource_id: UUID) -> LibraryResource:
        resource = await self.db.get(LibraryResource, resource_id, populate_existing=True)
        if not resource:
            raise not_found("Library resource not found")
        return resource

    async def create_resource(self, data: CreateLibraryResourceRequest) -> dict[str, Any]:
        values = data.model_dump()
        for field in BILINGUAL_REQUIRED:
            if not values[field] and not values[f"{field}_ar"]:
                raise bad_request(f"Either {field} or {field}_ar is required")

        file_size = values["file_size"] or 0
        resource = LibraryResource(
            title=values["title"] or values["title_ar"],
            title_ar=values["title_ar"],
            author=values["author"] or values["author_ar"],
            author_ar=values["author_ar"],
            institution=values["institution"],
            institution_ar=values["institution_ar"],
            summary=values["summary"] or values["summary_ar"],
            summary_ar=values["summary_ar"],
            type=(data.type or LibraryResourceType.BOOK).value,
            discipline=values["discipline"] or "general",
            discipline_ar=values["discipline_ar"],
            language=(data.language or LibraryLanguage.EN).value,
            file_url=values["file_url"] or "",
            file_type=values["file_type"] or "pdf",
            file_size=file_size,
            file_size_display=values["file_size_display"] or format_file_size(file_size),
            tags=values["tags"] or [],
            year=values["year"] or utcnow().year,
            is_previewable=True if values["is_previewable"] is None else values["is_previewable"],
            requires_login=bool(values["requires_login"]),
            preview_url=values["preview_url"] or values["file_url"],
            video_url=values["video_url"],
            thumbnail_url=values["thumbnail_url"],
            duration=values["duration"],
            duration_seconds=values["duration_seconds"],
        )
        self.db.add(resource)
        await self.db.commit()
        await self.db.refresh(resource)
        logger.info("Created library resource %s", resource.id)
        return format_resource(resource)

    async def list_resources(
        self,
        type: str | None = None,
        discipline: str | None = None,
        language: str | None = None,
        search: str | None = None,
    ) -> list[dict[str, Any]]:
        query = select(LibraryResource)
        if type:
            query = query.where(LibraryResource.type == type)
        if discipline:
            query = query.where(LibraryResource.discipline == discipline)
        if language:
            query = query.where(LibraryResource.language == language)
        if search and search.strip():
            pattern = f"%{search.strip()}%"
            query = query.where(
                or_(
                    LibraryResource.title.ilike(pattern),
                    LibraryResource.title_ar.ilike(pattern),
                    LibraryResource.author.ilike(pattern),
                    LibraryResource.summary.ilike(pattern),
                )
            )
        result = await self.db.execute(query.order_by(LibraryResource.created_at.desc()))
        return [format_resource(r) for r in result.scalars().all()]

    async def get_resource(self, resource_id: UUID) -> dict[str, Any]:
        return format_resource(await self._get(resource_id))

    async def update_resource(self, resource_id: UUID, data: UpdateLibraryResourceRequest) -> dict[str, Any]:
        resource = await self._get(resource_id)
        updates = data.model_dump(exclude_unset=True)
        for field, value in updates.items():
            if value is None and field in {"title", "author", "summary", "type", "discipline", "language"}:
                continue
            if field in {"type", "language"}:
                value = value.value
            setattr(resource, field, value)
        if "file_size" in updates and "file_size_display" not in updates and updates["file_size"] is not None:
            resource.file_size_display = format_file_size(updates["file_size"])
        await self.db.commit()
        await self.db.refresh(resource)
        return format_resource(resource)

    async def delete_resource(self, resource_id: UUID) -> None:
        resource = await self._get(resource_id)
        await self.db.delete(resource)
        await self.db.commit()

    async def _increment(self, resource_id: UUID, column: str) -> dict[str, Any]:
        await self._get(resource_id)
        counter = getattr(LibraryResource, column)
        await self.db.execute(
            update(LibraryResource)
            .where(LibraryResource.id == resource_id)
            .values({column: counter + 1})
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()
        resource = await self._get(resource_id)
        return {"id": str(resource_id), "count": getattr(resource, column)}

    async def record_download(self, resource_id: UUID) -> dict[str, Any]:
        return await self._increment(resource_id, "downloads")

    async def record_view(self, resource_id: UUID) -> dict[str, Any]:
        return await self._increment(resource_id, "views")

