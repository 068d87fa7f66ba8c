"""Reports router for flagging content to moderators."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_user
from app.database import get_db
from app.models.user import User
from app.schemas.reports import CreateReportRequest, CreateReportResponse
from app.services.reports import ReportService

router = APIRouter(prefix="/api/v1/reports", tags=["Reports"])


def get_report_service(db: AsyncSession = Depends(get_db)) -> ReportService:
    return ReportService(db)


@router.post("", response_model=CreateReportResponse)
async def create_report(
    data: CreateReportRequest,
    user: User = Depends(get_current_user),
    service: ReportService = Depends(get_report_service),
):
    return await service.create_report(user, data)
