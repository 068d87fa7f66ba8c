"""Library router. Reads are public; writes require an admin."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import require_admin
from app.database import get_db
from app.models.library import LibraryLanguage, LibraryResourceType
from app.models.user import User
from app.schemas.common import CounterResponse, StatusResponse
from app.schemas.library import (
    CreateLibraryResourceRequest,
    LibraryResourceResponse,
    UpdateLibraryResourceRequest,
)
from app.services.library import LibraryService

router = APIRouter(prefix="/api/v1/library", tags=["Library"])


def get_library_service(db: AsyncSession = Depends(get_db)) -> LibraryService:
    return LibraryService(db)


@router.get("", response_model=list[LibraryResourceResponse])
async def list_resources(
    type: LibraryResourceType | None = Query(default=None),
    discipline: str | None = Query(default=None),
    language: LibraryLanguage | None = Query(default=None),
    search: str | None = Query(default=None),
    service: LibraryService = Depends(get_library_service),
):
    return await service.list_resources(
        type=type.value if type else None,
        discipline=discipline,
        language=language.value if language else None,
        search=search,
    )


@router.post("", response_model=LibraryResourceResponse, status_code=status.HTTP_201_CREATED)
async def create_resource(
    data: CreateLibraryResourceRequest,
    admin: User = Depends(require_admin),
    service: LibraryService = Depends(get_library_service),
):
    return await service.create_resource(data)


@router.get("/{resource_id}", response_model=LibraryResourceResponse)
async def get_resource(
    resource_id: UUID,
    service: LibraryService = Depends(get_library_service),
):
    return await service.get_resource(resource_id)


@router.patch("/{resource_id}", response_model=LibraryResourceResponse)
async def update_resource(
    resource_id: UUID,
    data: UpdateLibraryResourceRequest,
    admin: User = Depends(require_admin),
    service: LibraryService = Depends(get_library_service),
):
    return await service.update_resource(resource_id, data)


@router.delete("/{resource_id}", response_model=StatusResponse)
async def delete_resource(
    resource_id: UUID,
    admin: User = Depends(require_admin),
    service: LibraryService = Depends(get_library_service),
):
    await service.delete_resource(resource_id)
    return StatusResponse(message="Library resource deleted")


@router.post("/{resource_id}/download", response_model=CounterResponse)
async def record_download(
    resource_id: UUID,
    service: LibraryService = Depends(get_library_service),
):
    return await service.record_download(resource_id)


@router.post("/{resource_id}/view", response_model=CounterResponse)
async def record_view(
    resource_id: UUID,
    service: LibraryService = Depends(get_library_service),
):
    return await service.record_view(resource_id)
