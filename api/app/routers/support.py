"""Support router: team membership and the contact form."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import require_admin
from app.database import get_db
from app.models.user import User
from app.schemas.support import (
    ContactRequest,
    ContactResponse,
    SetSupportTeamRequest,
    SetSupportTeamResponse,
    SupportTeamResponse,
)
from app.services.admin_security import AdminSecurityService
from app.services.support import SupportService

router = APIRouter(prefix="/api/v1/support", tags=["Support"])


def get_support_service(db: AsyncSession = Depends(get_db)) -> SupportService:
    return SupportService(db)


@router.get("/team", response_model=SupportTeamResponse)
async def get_team(service: SupportService = Depends(get_support_service)):
    return SupportTeamResponse(user_ids=await service.get_team_ids())


@router.post("/team", response_model=SetSupportTeamResponse)
async def set_team(
    data: SetSupportTeamRequest,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    service: SupportService = Depends(get_support_service),
):
    """Replace the support team. Requires the admin operations password."""
    await AdminSecurityService(db).require_operations_password(data.operations_password, missing_status=401)
    return SetSupportTeamResponse(user_ids=await service.set_team_ids(data.user_ids))


@router.post("/contact", response_model=ContactResponse)
async def contact_support(
    data: ContactRequest,
    service: SupportService = Depends(get_support_service),
):
    return await service.contact(data)
