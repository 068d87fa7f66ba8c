"""Collaborations router for listings and the application workflow."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_user, get_optional_user
from app.database import get_db
from app.models.collaboration import CollaborationStatus
from app.models.user import User
from app.schemas.collaborations import (
    ApplicationWithApplicant,
    ApplicationWithCollaboration,
    CollaborationDetailResponse,
    CollaborationResponse,
    CreateApplicationRequest,
    CreateCollaborationRequest,
    MyCollaborationResponse,
    UpdateApplicationStatusRequest,
    UpdateCollaborationRequest,
)
from app.schemas.common import StatusResponse
from app.services.collaborations import CollaborationService

router = APIRouter(prefix="/api/v1/collaborations", tags=["Collaborations"])


def get_collaboration_service(db: AsyncSession = Depends(get_db)) -> CollaborationService:
    return CollaborationService(db)


def _split_csv(value: str | None) -> list[str] | None:
    if not value:
        return None
    return [v.strip() for v in value.split(",") if v.strip()]


@router.post("", response_model=CollaborationResponse, status_code=status.HTTP_201_CREATED)
async def create_collaboration(
    data: CreateCollaborationRequest,
    user: User = Depends(get_current_user),
    service: CollaborationService = Depends(get_collaboration_service),
):
    return await service.create_collaboration(user, data)


@router.get("", response_model=list[CollaborationResponse])
async def list_collaborations(
    search: str | None = Query(default=None),
    disciplines: str | None = Query(default=None, description="Comma separated; any match"),
    application_areas: str | None = Query(default=None, description="Comma separated; any match"),
    is_remote: bool | None = Query(default=None),
    status: CollaborationStatus | None = Query(default=None),
    has_funding: bool | None = Query(default=None),
    service: CollaborationService = Depends(get_collaboration_service),
):
    return await service.list_collaborations(
        search=search,
        disciplines=_split_csv(disciplines),
        application_areas=_split_csv(application_areas),
        is_remote=is_remote,
        status=status.value if status else None,
        has_funding=has_funding,
    )


@router.get("/my-applications", response_model=list[ApplicationWithCollaboration])
async def my_applications(
    user: User = Depends(get_current_user),
    service: CollaborationService = Depends(get_collaboration_service),
):
    return await service.my_applications(user)


@router.get("/my-collaborations", response_model=list[MyCollaborationResponse])
async def my_collaborations(
    user: User = Depends(get_current_user),
    service: CollaborationService = Depends(get_collaboration_service),
):
    return await service.my_collaborations(user)


@router.patch("/applications/{application_id}/status", response_model=ApplicationWithApplicant)
async def update_application_status(
    application_id: UUID,
    data: UpdateApplicationStatusRequest,
    user: User = Depends(get_current_user),
    service: CollaborationService = Depends(get_collaboration_service),
):
    """Accept or reject an application (collaboration owner only)."""
    return await service.update_application_status(application_id, user, data.status)


@router.get("/{collaboration_id}", response_model=CollaborationDetailResponse)
async def get_collaboration(
    collaboration_id: UUID,
    user: User | None = Depends(get_optional_user),
    service: CollaborationService = Depends(get_collaboration_service),
):
    return await service.get_collaboration(collaboration_id, user)


@router.patch("/{collaboration_id}", response_model=CollaborationResponse)
async def update_collaboration(
    collaboration_id: UUID,
    data: UpdateCollaborationRequest,
    user: User = Depends(get_current_user),
    service: CollaborationService = Depends(get_collaboration_service),
):
    return await service.update_collaboration(collaboration_id, user, data)


@router.delete("/{collaboration_id}", response_model=StatusResponse)
async def delete_collaboration(
    collaboration_id: UUID,
    user: User = Depends(get_current_user),
    service: CollaborationService = Depends(get_collaboration_service),
):
    await service.delete_collaboration(collaboration_id, user)
    return StatusResponse(message="Collaboration deleted successfully")


@router.post(
    "/{collaboration_id}/apply",
    response_model=ApplicationWithApplicant,
    status_code=status.HTTP_201_CREATED,
)
async def apply(
    collaboration_id: UUID,
    data: CreateApplicationRequest,
    user: User = Depends(get_current_user),
    service: CollaborationService = Depends(get_collaboration_service),
):
    return await service.apply(collaboration_id, user, data)


@router.get("/{collaboration_id}/applications", response_model=list[ApplicationWithApplicant])
async def list_applications(
    collaboration_id: UUID,
    user: User = Depends(get_current_user),
    service: CollaborationService = Depends(get_collaboration_service),
):
    return await service.list_applications(collaboration_id, user)
