"""Content report schemas."""

from pydantic import BaseModel, field_validator

from app.models.report import ReportTargetType, ReportType
from app.schemas.common import IdStr, ORMModel, Timestamp


class CreateReportRequest(BaseModel):
    target_type: ReportTargetType
    target_id: str
    type: ReportType = ReportType.OTHER
    reason: str
    description: str | None = None

    @field_validator("target_id", "reason")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Value cannot be empty")
        return v.strip()


class ReportResponse(ORMModel):
    id: IdStr
    reporter_id: IdStr
    target_type: str
    target_id: str
    type: str
    reason: str
    description: str | None
    status: str
    is_resolved: bool
    created_at: Timestamp


class CreateReportResponse(BaseModel):
    """A repeat report on the same target is reported back with success=False."""

    success: bool
    message: str
    report: ReportResponse | None = None
