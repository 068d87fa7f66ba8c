"""Admin router for moderation, analytics and platform management."""

from typing import Any
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import require_admin
from app.database import get_db
from app.errors import bad_request
from app.models.topic_suggestion import TopicStatus
from app.models.user import User
from app.schemas.admin import (
    ActivityResponse,
    AdminContentListResponse,
    AdminPostResponse,
    AdminUserDetailResponse,
    AdminUserListResponse,
    AdminUserResponse,
    ChangeOperationsPasswordRequest,
    Contributor,
    EngagementResponse,
    FlagRequest,
    GrowthPoint,
    ModerationRequest,
    OperationsPasswordRequest,
    OverviewResponse,
    Period,
    PlatformSettings,
    RejectContentRequest,
    ReportGroupListResponse,
    ResolveReportsRequest,
    UpdateRoleRequest,
)
from app.schemas.common import StatusResponse
from app.schemas.events import AdminEventResponse, CreateEventRequest, UpdateEventRequest
from app.schemas.reports import ReportResponse
from app.schemas.topics import TopicSuggestionResponse, UpdateTopicStatusRequest
from app.services.admin import AdminService
from app.services.admin_security import AdminSecurityService
from app.services.events import EventService
from app.services.topics import TopicSuggestionService

router = APIRouter(prefix="/api/v1/admin", tags=["Admin"], dependencies=[Depends(require_admin)])


def get_admin_service(db: AsyncSession = Depends(get_db)) -> AdminService:
    return AdminService(db)


def get_security_service(db: AsyncSession = Depends(get_db)) -> AdminSecurityService:
    return AdminSecurityService(db)


@router.get("/overview", response_model=OverviewResponse)
async def overview(service: AdminService = Depends(get_admin_service)):
    return await service.overview()


# --- Users ---


@router.get("/users", response_model=AdminUserListResponse)
async def list_users(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    search: str | None = Query(default=None),
    service: AdminService = Depends(get_admin_service),
):
    return await service.list_users(page, limit, search)


@router.get("/users/{user_id}", response_model=AdminUserDetailResponse)
async def get_user(user_id: UUID, service: AdminService = Depends(get_admin_service)):
    return await service.get_user(user_id)


@router.patch("/users/{user_id}/verify", response_model=AdminUserResponse)
async def verify_user(user_id: UUID, service: AdminService = Depends(get_admin_service)):
    return await service.verify_user(user_id)


@router.patch("/users/{user_id}/suspend", response_model=AdminUserResponse)
async def suspend_user(
    user_id: UUID,
    data: ModerationRequest,
    service: AdminService = Depends(get_admin_service),
):
    return await service.suspend_user(user_id, data.reason, data.duration)


@router.patch("/users/{user_id}/unsuspend", response_model=AdminUserResponse)
async def unsuspend_user(user_id: UUID, service: AdminService = Depends(get_admin_service)):
    return await service.unsuspend_user(user_id)


@router.patch("/users/{user_id}/ban", response_model=AdminUserResponse)
async def ban_user(
    user_id: UUID,
    data: ModerationRequest,
    service: AdminService = Depends(get_admin_service),
):
    return await service.ban_user(user_id, data.reason, data.duration)


@router.patch("/users/{user_id}/unban", response_model=AdminUserResponse)
async def unban_user(user_id: UUID, service: AdminService = Depends(get_admin_service)):
    return await service.unban_user(user_id)


@router.patch("/users/{user_id}/role", response_model=AdminUserResponse)
async def update_role(
    user_id: UUID,
    data: UpdateRoleRequest,
    service: AdminService = Depends(get_admin_service),
):
    return await service.update_role(user_id, data.role.value)


@router.patch("/users/{user_id}/flag", response_model=AdminUserResponse)
async def flag_user(
    user_id: UUID,
    data: FlagRequest,
    service: AdminService = Depends(get_admin_service),
):
    return await service.flag_user(user_id, data.reason)


@router.patch("/users/{user_id}/unflag", response_model=AdminUserResponse)
async def unflag_user(user_id: UUID, service: AdminService = Depends(get_admin_service)):
    return await service.unflag_user(user_id)


@router.delete("/users/{user_id}", response_model=StatusResponse)
async def delete_user(user_id: UUID, service: AdminService = Depends(get_admin_service)):
    await service.delete_user(user_id)
    return StatusResponse(message="User deleted")


@router.post("/users/{user_id}/promote", response_model=AdminUserResponse)
async def promote_user(
    user_id: UUID,
    data: OperationsPasswordRequest,
    service: AdminService = Depends(get_admin_service),
    security: AdminSecurityService = Depends(get_security_service),
):
    """Grant the admin role. Requires the operations password."""
    await security.require_operations_password(data.operations_password)
    return await service.promote(user_id)


@router.post("/users/{user_id}/demote", response_model=AdminUserResponse)
async def demote_user(
    user_id: UUID,
    data: OperationsPasswordRequest,
    service: AdminService = Depends(get_admin_service),
    security: AdminSecurityService = Depends(get_security_service),
):
    """Revoke the admin role. The last remaining admin cannot be demoted."""
    await security.require_operations_password(data.operations_password)
    return await service.demote(user_id)


# --- Content ---


@router.get("/content", response_model=AdminContentListResponse)
async def list_content(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    status: str | None = Query(default=None, description="all, flagged, pending, approved or rejected"),
    search: str | None = Query(default=None),
    service: AdminService = Depends(get_admin_service),
):
    return await service.list_content(page, limit, status, search)


@router.patch("/content/{post_id}/approve", response_model=AdminPostResponse)
async def approve_content(
    post_id: UUID,
    admin: User = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    return await service.approve_content(post_id, admin)


@router.patch("/content/{post_id}/reject", response_model=AdminPostResponse)
async def reject_content(
    post_id: UUID,
    data: RejectContentRequest,
    admin: User = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    return await service.reject_content(post_id, admin, data.reason)


@router.delete("/content/{post_id}", response_model=StatusResponse)
async def delete_content(post_id: UUID, service: AdminService = Depends(get_admin_service)):
    await service.delete_content(post_id)
    return StatusResponse(message="Post deleted")


# --- Reports ---


@router.get("/reports", response_model=ReportGroupListResponse)
async def list_reports(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    status: str | None = Query(default=None),
    service: AdminService = Depends(get_admin_service),
):
    return await service.list_reports(page, limit, status)


@router.patch("/reports/resolve", response_model=StatusResponse)
async def resolve_reports(
    data: ResolveReportsRequest,
    admin: User = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    await service.resolve_reports(data.target_type.value, data.target_id, admin)
    return StatusResponse(message="All reports for this content have been resolved")


@router.patch("/reports/{report_id}/dismiss", response_model=ReportResponse)
async def dismiss_report(report_id: UUID, service: AdminService = Depends(get_admin_service)):
    return await service.dismiss_report(report_id)


# --- Analytics ---


@router.get("/analytics/growth", response_model=list[GrowthPoint])
async def growth(
    period: Period = Query(default="7days"),
    service: AdminService = Depends(get_admin_service),
):
    return await service.growth(period)


@router.get("/analytics/contributors", response_model=list[Contributor])
async def top_contributors(
    limit: int = Query(default=10, ge=1, le=100),
    service: AdminService = Depends(get_admin_service),
):
    return await service.top_contributors(limit)


@router.get("/analytics/activity", response_model=ActivityResponse)
async def activity(
    period: Period = Query(default="7days"),
    service: AdminService = Depends(get_admin_service),
):
    return await service.activity(period)


@router.get("/analytics/engagement", response_model=EngagementResponse)
async def engagement(service: AdminService = Depends(get_admin_service)):
    return await service.engagement()


# --- Settings and security ---


@router.get("/settings", response_model=PlatformSettings)
async def get_platform_settings():
    return PlatformSettings()


@router.patch("/settings", response_model=PlatformSettings)
async def update_platform_settings(body: dict[str, Any] = Body(default={})):
    """Echo the submitted settings over the defaults; nothing is persisted."""
    return PlatformSettings(**body)


@router.patch("/security/password", response_model=StatusResponse)
async def change_operations_password(
    data: ChangeOperationsPasswordRequest,
    security: AdminSecurityService = Depends(get_security_service),
):
    if not data.new_password or data.new_password != data.confirm_password:
        raise bad_request("New password and confirmation must match")
    await security.update_operations_password(data.current_password, data.new_password)
    return StatusResponse(message="Operations password updated")


# --- Topic suggestions ---


def get_topic_service(db: AsyncSession = Depends(get_db)) -> TopicSuggestionService:
    return TopicSuggestionService(db)


@router.get("/topics", response_model=list[TopicSuggestionResponse])
async def list_topics(
    status: TopicStatus | None = Query(default=None),
    service: TopicSuggestionService = Depends(get_topic_service),
):
    return await service.list_suggestions(status=status.value if status else None)


@router.patch("/topics/{topic_id}/status", response_model=TopicSuggestionResponse)
async def update_topic_status(
    topic_id: UUID,
    data: UpdateTopicStatusRequest,
    service: TopicSuggestionService = Depends(get_topic_service),
):
    return await service.update_status(topic_id, data.status.value)


@router.delete("/topics/{topic_id}", response_model=StatusResponse)
async def delete_topic(topic_id: UUID, service: TopicSuggestionService = Depends(get_topic_service)):
    await service.delete(topic_id)
    return StatusResponse(message="Topic suggestion deleted")


# --- Events ---


def get_event_service(db: AsyncSession = Depends(get_db)) -> EventService:
    return EventService(db)


@router.get("/events", response_model=list[AdminEventResponse])
async def list_events(service: EventService = Depends(get_event_service)):
    return await service.list_events()


@router.post("/events", response_model=AdminEventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    data: CreateEventRequest,
    admin: User = Depends(require_admin),
    service: EventService = Depends(get_event_service),
):
    return await service.create_event(admin, data)


@router.patch("/events/{event_id}", response_model=AdminEventResponse)
async def update_event(
    event_id: UUID,
    data: UpdateEventRequest,
    service: EventService = Depends(get_event_service),
):
    return await service.update_event(event_id, data)


@router.delete("/events/{event_id}", response_model=StatusResponse)
async def delete_event(event_id: UUID, service: EventService = Depends(get_event_service)):
    await service.delete_event(event_id)
    return StatusResponse(message="Event deleted")


@router.patch("/events/{event_id}/toggle", response_model=AdminEventResponse)
async def toggle_event(event_id: UUID, service: EventService = Depends(get_event_service)):
    return await service.toggle_event(event_id)
