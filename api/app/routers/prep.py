"""Prep-resources router for exam study material and videos."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import require_admin
from app.database import get_db
from app.models.prep import ExamType, PrepLanguage, PrepLevel
from app.models.user import User
from app.schemas.common import CounterResponse, StatusResponse
from app.schemas.prep import (
    CreatePrepResourceRequest,
    CreatePrepVideoRequest,
    PrepResourceResponse,
    PrepVideoResponse,
    UpdatePrepResourceRequest,
    UpdatePrepVideoRequest,
)
from app.services.prep import PrepService

router = APIRouter(prefix="/api/v1/prep-resources", tags=["Prep Resources"])


def get_prep_service(db: AsyncSession = Depends(get_db)) -> PrepService:
    return PrepService(db)


def _filters(exam_type, level, language, search) -> dict:
    return {
        "exam_type": exam_type.value if exam_type else None,
        "level": level.value if level else None,
        "language": language.value if language else None,
        "search": search,
    }


# --- Resources ---


@router.get("/resources", response_model=list[PrepResourceResponse])
async def list_resources(
    exam_type: ExamType | None = Query(default=None),
    level: PrepLevel | None = Query(default=None),
    language: PrepLanguage | None = Query(default=None),
    search: str | None = Query(default=None),
    service: PrepService = Depends(get_prep_service),
):
    return await service.list_resources(**_filters(exam_type, level, language, search))


@router.post("/resources", response_model=PrepResourceResponse, status_code=status.HTTP_201_CREATED)
async def create_resource(
    data: CreatePrepResourceRequest,
    admin: User = Depends(require_admin),
    service: PrepService = Depends(get_prep_service),
):
    return await service.create_resource(data)


@router.get("/resources/{resource_id}", response_model=PrepResourceResponse)
async def get_resource(resource_id: UUID, service: PrepService = Depends(get_prep_service)):
    return await service.get_resource(resource_id)


@router.patch("/resources/{resource_id}", response_model=PrepResourceResponse)
async def update_resource(
    resource_id: UUID,
    data: UpdatePrepResourceRequest,
    admin: User = Depends(require_admin),
    service: PrepService = Depends(get_prep_service),
):
    return await service.update_resource(resource_id, data)


@router.delete("/resources/{resource_id}", response_model=StatusResponse)
async def delete_resource(
    resource_id: UUID,
    admin: User = Depends(require_admin),
    service: PrepService = Depends(get_prep_service),
):
    await service.delete_resource(resource_id)
    return StatusResponse(message="Prep resource deleted")


@router.post("/resources/{resource_id}/download", response_model=CounterResponse)
async def record_resource_download(resource_id: UUID, service: PrepService = Depends(get_prep_service)):
    return await service.record_resource_download(resource_id)


@router.post("/resources/{resource_id}/view", response_model=CounterResponse)
async def record_resource_view(resource_id: UUID, service: PrepService = Depends(get_prep_service)):
    return await service.record_resource_view(resource_id)


# --- Videos ---


@router.get("/videos", response_model=list[PrepVideoResponse])
async def list_videos(
    exam_type: ExamType | None = Query(default=None),
    level: PrepLevel | None = Query(default=None),
    language: PrepLanguage | None = Query(default=None),
    search: str | None = Query(default=None),
    service: PrepService = Depends(get_prep_service),
):
    return await service.list_videos(**_filters(exam_type, level, language, search))


@router.post("/videos", response_model=PrepVideoResponse, status_code=status.HTTP_201_CREATED)
async def create_video(
    data: CreatePrepVideoRequest,
    admin: User = Depends(require_admin),
    service: PrepService = Depends(get_prep_service),
):
    return await service.create_video(data)


@router.get("/videos/{video_id}", response_model=PrepVideoResponse)
async def get_video(video_id: UUID, service: PrepService = Depends(get_prep_service)):
    return await service.get_video(video_id)


@router.patch("/videos/{video_id}", response_model=PrepVideoResponse)
async def update_video(
    video_id: UUID,
    data: UpdatePrepVideoRequest,
    admin: User = Depends(require_admin),
    service: PrepService = Depends(get_prep_service),
):
    return await service.update_video(video_id, data)


@router.delete("/videos/{video_id}", response_model=StatusResponse)
async def delete_video(
    video_id: UUID,
    admin: User = Depends(require_admin),
    service: PrepService = Depends(get_prep_service),
):
    await service.delete_video(video_id)
    return StatusResponse(message="Prep video deleted")


@router.post("/videos/{video_id}/view", response_model=CounterResponse)
async def record_video_view(video_id: UUID, service: PrepService = Depends(get_prep_service)):
    return await service.record_video_view(video_id)
