"""Admin console schemas."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

from app.models.report import ReportTargetType
from app.models.user import UserRoleName
from app.schemas.common import AuthorSummary, IdStr, ORMModel, Timestamp
from app.schemas.posts import PostResponse
from app.schemas.reports import ReportResponse
from app.schemas.users import UserPrivateResponse


class OverviewResponse(BaseModel):
    total_users: int
    total_posts: int
    total_questions: int
    total_collaborations: int
    active_users: int
    new_users_this_week: int
    pending_reports: int
    new_reports_today: int


# --- Users ---


class AdminUserItem(ORMModel):
    id: IdStr
    email: str
    username: str
    full_name: str | None
    role: str
    is_verified: bool
    is_suspended: bool
    is_banned: bool
    is_flagged: bool
    created_at: Timestamp
    posts_count: int = 0
    comments_count: int = 0


class AdminUserListResponse(BaseModel):
    users: list[AdminUserItem]
    total: int
    page: int
    limit: int
    total_pages: int


class AdminUserResponse(UserPrivateResponse):
    """A user's profile with every moderation field exposed."""

    suspension_reason: str | None
    banned_until: Timestamp | None
    ban_reason: str | None
    is_flagged: bool
    flag_reason: str | None


class UserContentCounts(BaseModel):
    posts: int
    comments: int
    questions: int
    answers: int
    collaborations: int


class AdminUserDetailResponse(AdminUserResponse):
    counts: UserContentCounts


class ModerationRequest(BaseModel):
    """Reason and optional duration in days for a suspension or ban; no duration means indefinite."""

    reason: str | None = None
    duration: int | None = None


class FlagRequest(BaseModel):
    reason: str | None = None


class UpdateRoleRequest(BaseModel):
    role: UserRoleName


class OperationsPasswordRequest(BaseModel):
    operations_password: str | None = None


# --- Content ---


class AdminPostResponse(PostResponse):
    author_is_flagged: bool
    author_flag_reason: str | None
    reviewed_by: str | None
    approved_at: Timestamp | None
    rejected_at: Timestamp | None
    rejection_reason: str | None


class AdminContentListResponse(BaseModel):
    posts: list[AdminPostResponse]
    total: int
    page: int
    limit: int
    total_pages: int


class RejectContentRequest(BaseModel):
    reason: str | None = None


# --- Reports ---


class AdminReportItem(ReportResponse):
    reporter: AuthorSummary | None


class ReportGroup(BaseModel):
    """All open reports against one piece of content."""

    target_type: str
    target_id: str
    reports: list[AdminReportItem]
    report_count: int
    first_reported_at: Timestamp
    latest_reported_at: Timestamp
    target_content: dict[str, Any]


class ReportGroupListResponse(BaseModel):
    reports: list[ReportGroup]
    total: int
    page: int
    limit: int
    total_pages: int


class ResolveReportsRequest(BaseModel):
    target_type: ReportTargetType
    target_id: str


# --- Analytics ---

Period = Literal["7days", "30days"]


class GrowthPoint(BaseModel):
    date: str
    users: int
    posts: int


class Contributor(BaseModel):
    id: str
    username: str
    full_name: str | None
    avatar_url: str | None
    posts_count: int
    comments_count: int
    total_contributions: int


class ActivityResponse(BaseModel):
    posts: int
    comments: int
    questions: int


class EngagementResponse(BaseModel):
    total_posts: int
    total_likes: int
    total_comments: int
    total_shares: int
    avg_likes_per_post: float
    avg_comments_per_post: float


# --- Settings and security ---


class PlatformSettings(BaseModel):
    """Static platform settings. Updates are echoed back without being stored."""

    model_config = ConfigDict(extra="allow")

    site_name: str = "Palyrenet"
    maintenance_mode: bool = False
    allow_registration: bool = True
    require_email_verification: bool = False


class ChangeOperationsPasswordRequest(BaseModel):
    current_password: str = ""
    new_password: str = ""
    confirm_password: str = ""
