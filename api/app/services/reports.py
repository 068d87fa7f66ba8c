"""Report submission service."""

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.report import Report, ReportStatus
from app.models.user import User
from app.schemas.reports import CreateReportRequest, ReportResponse

logger = logging.getLogger(__name__)


class ReportService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_report(self, user: User, data: CreateReportRequest) -> dict[str, Any]:
        """File a report unless the caller already has a live one against the same target."""
        existing = await self.db.execute(
            select(Report.id)
            .where(Report.reporter_id == user.id)
            .where(Report.target_type == data.target_type.value)
            .where(Report.target_id == data.target_id)
            .where(Report.status != ReportStatus.DISMISSED.value)
        )
        if existing.first():
            return {"success": False, "message": "You have already reported this content"}

        report = Report(
            reporter_id=user.id,
            target_type=data.target_type.value,
            target_id=data.target_id,
            type=data.type.value,
            reason=data.reason,
            description=data.description,
        )
        self.db.add(report)
        await self.db.commit()
        await self.db.refresh(report)
        logger.info("User %s reported %s %s", user.id, report.target_type, report.target_id)

        return {
            "success": True,
            "message": "Report submitted successfully",
            "report": ReportResponse.model_validate(report).model_dump(),
        }
