"""Admin console service: moderation, reports and analytics."""

import logging
from datetime import timedelta
from typing import Any
from uuid import UUID

from sqlalchemy import func, or_, select, union, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.errors import bad_request, not_found
from app.models.collaboration import Collaboration
from app.models.post import Comment, Like, ModerationStatus, Post
from app.models.question import Answer, Question
from app.models.report import Report, ReportStatus
from app.models.types import utcnow
from app.models.user import User, UserRoleName
from app.schemas.admin import AdminPostResponse, AdminReportItem, AdminUserResponse
from app.schemas.common import author_summary, page_info
from app.schemas.reports import ReportResponse
from app.services.collaborations import COLLABORATION_LOAD_OPTIONS, format_collaboration
from app.services.posts import POST_LOAD_OPTIONS, format_post
from app.services.questions import QUESTION_LOAD_OPTIONS, format_question

logger = logging.getLogger(__name__)

ACTIVE_WINDOW_DAYS = 7


def _period_days(period: str | None) -> int:
    return 30 if period == "30days" else 7


def _start_of_day(value):
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


def _author_count(model, author_column):
    """Correlated count of a user's rows in another table."""
    return (
        select(func.count(model.id))
        .where(author_column == User.id)
        .correlate(User)
        .scalar_subquery()
    )


def format_admin_user(user: User) -> dict[str, Any]:
    return AdminUserResponse.model_validate(user).model_dump()


def format_admin_post(post: Post) -> dict[str, Any]:
    data = format_post(post)
    # Moderators always see who wrote a post
    data["author_id"] = str(post.author_id)
    data["author"] = author_summary(post.author)
    data.update(
        author_is_flagged=post.author.is_flagged,
        author_flag_reason=post.author.flag_reason,
        reviewed_by=str(post.reviewed_by) if post.reviewed_by else None,
        approved_at=post.approved_at,
        rejected_at=post.rejected_at,
        rejection_reason=post.rejection_reason,
    )
    return AdminPostResponse.model_validate(data).model_dump()


class AdminService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _count(self, column, *criteria) -> int:
        query = select(func.count(column))
        for criterion in criteria:
            query = query.where(criterion)
        result = await self.db.execute(query)
        return result.scalar_one()

    # --- Overview ---

    async def overview(self) -> dict[str, int]:
        now = utcnow()
        week_ago = now - timedelta(days=ACTIVE_WINDOW_DAYS)
        today = _start_of_day(now)

        recent_authors = union(
            select(Post.author_id.label("user_id")).where(Post.created_at >= week_ago),
            select(Comment.author_id.label("user_id")).where(Comment.created_at >= week_ago),
        ).subquery()
        active = await self.db.execute(select(func.count()).select_from(recent_authors))

        return {
            "total_users": await self._count(User.id),
            "total_posts": await self._count(Post.id),
            "total_questions": await self._count(Question.id),
            "total_collaborations": await self._count(Collaboration.id),
            "active_users": active.scalar_one(),
            "new_users_this_week": await self._count(User.id, User.created_at >= week_ago),
            "pending_reports": await self._count(Report.id, Report.status == ReportStatus.PENDING.value),
            "new_reports_today": await self._count(
                Report.id,
                Report.status == ReportStatus.PENDING.value,
                Report.created_at >= today,
            ),
        }

    # --- Users ---

    async def _get_user(self, user_id: UUID) -> User:
        user = await self.db.get(User, user_id, populate_existing=True)
        if not user:
            raise not_found("User not found")
        return user

    async def _save_user(self, user: User) -> dict[str, Any]:
        await self.db.commit()
        await self.db.refresh(user)
        return format_admin_user(user)

    async def list_users(self, page: int = 1, limit: int = 10, search: str | None = None) -> dict[str, Any]:
        criteria = []
        if search and search.strip():
            pattern = f"%{search.strip()}%"
            criteria.append(
                or_(User.username.ilike(pattern), User.email.ilike(pattern), User.full_name.ilike(pattern))
            )

        posts_count = _author_count(Post, Post.author_id).label("posts_count")
        comments_count = _author_count(Comment, Comment.author_id).label("comments_count")
        query = select(User, posts_count, comments_count)
        for criterion in criteria:
            query = query.where(criterion)
        result = await self.db.execute(
            query.order_by(User.created_at.desc()).offset((page - 1) * limit).limit(limit)
        )

        users = []
        for user, posts, comments in result.all():
            users.append(
                {
                    "id": user.id,
                    "email": user.email,
                    "username": user.username,
                    "full_name": user.full_name,
                    "role": user.role,
                    "is_verified": user.is_verified,
                    "is_suspended": user.is_suspended,
                    "is_banned": user.is_banned,
                    "is_flagged": user.is_flagged,
                    "created_at": user.created_at,
                    "posts_count": posts,
                    "comments_count": comments,
                }
            )
        total = await self._count(User.id, *criteria)
        return {"users": users, **page_info(page, limit, total)}

    async def get_user(self, user_id: UUID) -> dict[str, Any]:
        user = await self._get_user(user_id)
        data = format_admin_user(user)
        data["counts"] = {
            "posts": await self._count(Post.id, Post.author_id == user_id),
            "comments": await self._count(Comment.id, Comment.author_id == user_id),
            "questions": await self._count(Question.id, Question.author_id == user_id),
            "answers": await self._count(Answer.id, Answer.author_id == user_id),
            "collaborations": await self._count(Collaboration.id, Collaboration.owner_id == user_id),
        }
        return data

    async def verify_user(self, user_id: UUID) -> dict[str, Any]:
        user = await self._get_user(user_id)
        user.is_verified = True
        return await self._save_user(user)

    async def suspend_user(self, user_id: UUID, reason: str | None, duration: int | None) -> dict[str, Any]:
        user = await self._get_user(user_id)
        user.is_suspended = True
        user.suspended_until = utcnow() + timedelta(days=duration) if duration else None
        user.suspension_reason = reason
        logger.info("Suspended user %s", user_id)
        return await self._save_user(user)

    async def unsuspend_user(self, user_id: UUID) -> dict[str, Any]:
        user = await self._get_user(user_id)
        user.is_suspended = False
        user.suspended_until = None
        user.suspension_reason = None
        return await self._save_user(user)

    async def ban_user(self, user_id: UUID, reason: str | None, duration: int | None) -> dict[str, Any]:
        user = await self._get_user(user_id)
        user.is_banned = True
        user.banned_until = utcnow() + timedelta(days=duration) if duration else None
        user.ban_reason = reason
        logger.info("Banned user %s", user_id)
        return await self._save_user(user)

    async def unban_user(self, user_id: UUID) -> dict[str, Any]:
        user = await self._get_user(user_id)
        user.is_banned = False
        user.banned_until = None
        user.ban_reason = None
        return await self._save_user(user)

    async def flag_user(self, user_id: UUID, reason: str | None) -> dict[str, Any]:
        user = await self._get_user(user_id)
        user.is_flagged = True
        user.flag_reason = reason
        return await self._save_user(user)

    async def unflag_user(self, user_id: UUID) -> dict[str, Any]:
        user = await self._get_user(user_id)
        user.is_flagged = False
        user.flag_reason = None
        return await self._save_user(user)

    async def update_role(self, user_id: UUID, role: str) -> dict[str, Any]:
        user = await self._get_user(user_id)
        user.role = role
        return await self._save_user(user)

    async def promote(self, user_id: UUID) -> dict[str, Any]:
        user = await self._get_user(user_id)
        if user.role == UserRoleName.ADMIN.value:
            raise bad_request("User is already an admin")
        user.role = UserRoleName.ADMIN.value
        logger.info("Promoted user %s to admin", user_id)
        return await self._save_user(user)

    async def demote(self, user_id: UUID) -> dict[str, Any]:
        user = await self._get_user(user_id)
        if user.role != UserRoleName.ADMIN.value:
            raise bad_request("User is not an admin")
        if await self._count(User.id, User.role == UserRoleName.ADMIN.value) <= 1:
            raise bad_request("At least one admin is required")
        user.role = UserRoleName.STUDENT.value
        logger.info("Demoted admin %s", user_id)
        return await self._save_user(user)

    async def delete_user(self, user_id: UUID) -> None:
        user = await self._get_user(user_id)
        await self.db.delete(user)
        await self.db.commit()
        logger.info("Deleted user %s", user_id)

    # --- Content ---

    async def _get_post(self, post_id: UUID) -> Post:
        result = await self.db.execute(
            select(Post)
            .options(*POST_LOAD_OPTIONS)
            .where(Post.id == post_id)
            .execution_options(populate_existing=True)
        )
        post = result.scalar_one_or_none()
        if not post:
            raise not_found("Post not found")
        return post

    async def list_content(
        self, page: int = 1, limit: int = 20, status: str | None = None, search: str | None = None
    ) -> dict[str, Any]:
        """
        Posts for moderation, flagged authors first.

        A status of 'flagged' selects posts by flagged users; other statuses
        match the moderation status and 'all' disables the filter.
        """
        criteria = []
        if status and status != "all":
            if status == "flagged":
                criteria.append(User.is_flagged.is_(True))
            else:
                criteria.append(Post.moderation_status == status.upper())
        if search and search.strip():
            pattern = f"%{search.strip()}%"
            criteria.append(
                or_(Post.content.ilike(pattern), User.username.ilike(pattern), User.full_name.ilike(pattern))
            )

        query = select(Post).join(User, Post.author_id == User.id).options(*POST_LOAD_OPTIONS)
        count_query = select(func.count(Post.id)).join(User, Post.author_id == User.id)
        for criterion in criteria:
            query = query.where(criterion)
            count_query = count_query.where(criterion)

        result = await self.db.execute(
            query.order_by(User.is_flagged.desc(), Post.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        total = (await self.db.execute(count_query)).scalar_one()
        return {"posts": [format_admin_post(p) for p in result.scalars().all()], **page_info(page, limit, total)}

    async def approve_content(self, post_id: UUID, reviewer: User) -> dict[str, Any]:
        post = await self._get_post(post_id)
        post.moderation_status = ModerationStatus.APPROVED.value
        post.approved_at = utcnow()
        post.reviewed_by = reviewer.id
        post.rejection_reason = None
        await self.db.commit()
        return format_admin_post(await self._get_post(post_id))

    async def reject_content(self, post_id: UUID, reviewer: User, reason: str | None) -> dict[str, Any]:
        post = await self._get_post(post_id)
        post.moderation_status = ModerationStatus.REJECTED.value
        post.rejected_at = utcnow()
        post.reviewed_by = reviewer.id
        post.rejection_reason = reason
        await self.db.commit()
        return format_admin_post(await self._get_post(post_id))

    async def delete_content(self, post_id: UUID) -> None:
        post = await self._get_post(post_id)
        await self.db.delete(post)
        await self.db.commit()

    # --- Reports ---

    async def _target_content(self, target_type: str, target_id: str) -> dict[str, Any] | None:
        try:
            item_id = UUID(target_id)
        except ValueError:
            return None

        if target_type == "post":
            result = await self.db.execute(select(Post).options(*POST_LOAD_OPTIONS).where(Post.id == item_id))
            post = result.scalar_one_or_none()
            return format_admin_post(post) if post else None
        if target_type == "comment":
            result = await self.db.execute(
                select(Comment).options(selectinload(Comment.author)).where(Comment.id == item_id)
            )
            comment = result.scalar_one_or_none()
            if not comment:
                return None
            return {
                "id": str(comment.id),
                "content": comment.content,
                "post_id": str(comment.post_id),
                "author": author_summary(comment.author),
                "created_at": comment.created_at,
            }
        if target_type == "question":
            result = await self.db.execute(
                select(Question).options(*QUESTION_LOAD_OPTIONS).where(Question.id == item_id)
            )
            question = result.scalar_one_or_none()
            return format_question(question) if question else None
        if target_type == "collaboration":
            result = await self.db.execute(
                select(Collaboration).options(*COLLABORATION_LOAD_OPTIONS).where(Collaboration.id == item_id)
            )
            collaboration = result.scalar_one_or_none()
            return format_collaboration(collaboration) if collaboration else None
        return None

    async def list_reports(self, page: int = 1, limit: int = 10, status: str | None = None) -> dict[str, Any]:
        """
        Unresolved reports grouped by target, newest first.

        Groups whose target no longer exists are left out of the page but still
        count towards the total.
        """
        query = (
            select(Report)
            .options(selectinload(Report.reporter))
            .where(Report.is_resolved.is_(False))
            .order_by(Report.created_at.desc())
        )
        if status and status != "all":
            query = query.where(Report.status == status.upper())
        result = await self.db.execute(query)

        groups: dict[tuple[str, str], dict[str, Any]] = {}
        for report in result.scalars().all():
            key = (report.target_type, report.target_id)
            group = groups.get(key)
            if group is None:
                group = {
                    "target_type": report.target_type,
                    "target_id": report.target_id,
                    "reports": [],
                    "report_count": 0,
                    "first_reported_at": report.created_at,
                    "latest_reported_at": report.created_at,
                }
                groups[key] = group
            item = AdminReportItem.model_validate(
                {**ReportResponse.model_validate(report).model_dump(), "reporter": author_summary(report.reporter)}
            )
            group["reports"].append(item.model_dump())
            group["report_count"] += 1
            group["first_reported_at"] = min(group["first_reported_at"], report.created_at)
            group["latest_reported_at"] = max(group["latest_reported_at"], report.created_at)

        grouped = list(groups.values())
        start = (page - 1) * limit
        items = []
        for group in grouped[start : start + limit]:
            content = await self._target_content(group["target_type"], group["target_id"])
            if content is None:
                logger.warning("Reported %s %s no longer exists", group["target_type"], group["target_id"])
                continue
            items.append({**group, "target_content": content})

        return {"reports": items, **page_info(page, limit, len(grouped))}

    async def resolve_reports(self, target_type: str, target_id: str, admin: User) -> int:
        """Resolve every non-dismissed report against a target."""
        result = await self.db.execute(
            update(Report)
            .where(Report.target_type == target_type)
            .where(Report.target_id == target_id)
            .where(Report.status != ReportStatus.DISMISSED.value)
            .values(
                status=ReportStatus.RESOLVED.value,
                is_resolved=True,
                resolved_at=utcnow(),
                resolved_by=admin.id,
            )
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()
        return result.rowcount or 0

    async def dismiss_report(self, report_id: UUID) -> dict[str, Any]:
        report = await self.db.get(Report, report_id, populate_existing=True)
        if not report:
            raise not_found("Report not found")
        report.status = ReportStatus.DISMISSED.value
        report.resolved_at = utcnow()
        await self.db.commit()
        await self.db.refresh(report)
        return ReportResponse.model_validate(report).model_dump()

    # --- Analytics ---

    async def growth(self, period: str | None = None) -> list[dict[str, Any]]:
        """New users and posts per day for the last 7 or 30 days, oldest first."""
        today = _start_of_day(utcnow())
        points = []
        for offset in range(_period_days(period) - 1, -1, -1):
            start = today - timedelta(days=offset)
            end = start + timedelta(days=1)
            points.append(
                {
                    "date": start.date().isoformat(),
                    "users": await self._count(User.id, User.created_at >= start, User.created_at < end),
                    "posts": await self._count(Post.id, Post.created_at >= start, Post.created_at < end),
                }
            )
        return points

    async def top_contributors(self, limit: int = 10) -> list[dict[str, Any]]:
        posts_count = _author_count(Post, Post.author_id).label("posts_count")
        comments_count = _author_count(Comment, Comment.author_id).label("comments_count")
        result = await self.db.execute(
            select(User, posts_count, comments_count)
            .order_by(posts_count.desc(), comments_count.desc(), User.created_at)
            .limit(limit)
        )
        return [
            {
                "id": str(user.id),
                "username": user.username,
                "full_name": user.full_name,
                "avatar_url": user.avatar_url,
                "posts_count": posts,
                "comments_count": comments,
                "total_contributions": posts + comments,
            }
            for user, posts, comments in result.all()
        ]

    async def activity(self, period: str | None = None) -> dict[str, int]:
        since = utcnow() - timedelta(days=_period_days(period))
        return {
            "posts": await self._count(Post.id, Post.created_at >= since),
            "comments": await self._count(Comment.id, Comment.created_at >= since),
            "questions": await self._count(Question.id, Question.created_at >= since),
        }

    async def engagement(self) -> dict[str, Any]:
        total_posts = await self._count(Post.id)
        total_likes = await self._count(Like.id)
        total_comments = await self._count(Comment.id)
        shares = await self.db.execute(select(func.coalesce(func.sum(Post.shares), 0)))
        return {
            "total_posts": total_posts,
            "total_likes": total_likes,
            "total_comments": total_comments,
            "total_shares": shares.scalar_one(),
            "avg_likes_per_post": round(total_likes / total_posts, 2) if total_posts else 0,
            "avg_comments_per_post": round(total_comments / total_posts, 2) if total_posts else 0,
        }

