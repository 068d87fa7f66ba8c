"""Post feed service: posts, comments, likes, saves and view counting."""

import logging
from typing import Any, Literal
from uuid import UUID

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.errors import bad_request, forbidden, not_found
from app.models.notification import NotificationType
from app.models.post import Comment, CommentLike, Like, Post, PostView, SavedPost
from app.models.types import json_array_contains, json_array_overlaps
from app.models.user import User
from app.schemas.common import author_summary
from app.schemas.posts import CreatePostRequest, UpdatePostRequest
from app.services.notifications import NotificationService

logger = logging.getLogger(__name__)

SortBy = Literal["latest", "popular", "most-viewed"]

POST_LOAD_OPTIONS = (
    selectinload(Post.author),
    selectinload(Post.likes),
    selectinload(Post.saves),
    selectinload(Post.comments),
)

COMMENT_LOAD_OPTIONS = (
    selectinload(Comment.author),
    selectinload(Comment.likes),
    selectinload(Comment.replies).selectinload(Comment.author),
    selectinload(Comment.replies).selectinload(Comment.likes),
)

RELATED_DEFAULT_LIMIT = 6
RELATED_MAX_LIMIT = 12


def format_post(post: Post, viewer_id: UUID | None = None) -> dict[str, Any]:
    """Serialize a post with counters and the viewer's like/save state. Anonymous posts hide the author."""
    return {
        "id": str(post.id),
        "title": post.title,
        "content": post.content,
        "category": post.category,
        "tags": post.tags or [],
        "image_urls": post.image_urls or [],
        "file_urls": post.file_urls or [],
        "is_anonymous": post.is_anonymous,
        "author_id": None if post.is_anonymous else str(post.author_id),
        "author": None if post.is_anonymous else author_summary(post.author),
        "views": post.views,
        "shares": post.shares,
        "archived": post.archived,
        "moderation_status": post.moderation_status,
        "likes_count": len(post.likes),
        "comments_count": len(post.comments),
        "is_liked": viewer_id is not None and any(like.user_id == viewer_id for like in post.likes),
        "is_saved": viewer_id is not None and any(save.user_id == viewer_id for save in post.saves),
        "created_at": post.created_at,
        "updated_at": post.updated_at,
    }


def format_comment(comment: Comment, viewer_id: UUID | None = None, with_replies: bool = True) -> dict[str, Any]:
    data = {
        "id": str(comment.id),
        "post_id": str(comment.post_id),
        "parent_id": str(comment.parent_id) if comment.parent_id else None,
        "content": comment.content,
        "author": author_summary(comment.author),
        "likes_count": len(comment.likes),
        "is_liked": viewer_id is not None and any(like.user_id == viewer_id for like in comment.likes),
        "created_at": comment.created_at,
        "replies": [],
    }
    if with_replies:
        data["replies"] = [format_comment(r, viewer_id, with_replies=False) for r in comment.replies]
    return data


class PostService:
    """Service for the post feed."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.dialect = db.bind.dialect.name
        self.notifications = NotificationService(db)

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

    async def _get_owned_post(self, post_id: UUID, user: User) -> Post:
        post = await self._get_post(post_id)
        if post.author_id != user.id:
            raise forbidden("You can only modify your own posts")
        return post

    async def _top_level_comments(self, post_id: UUID) -> list[Comment]:
        result = await self.db.execute(
            select(Comment)
            .options(*COMMENT_LOAD_OPTIONS)
            .where(Comment.post_id == post_id)
            .where(Comment.parent_id.is_(None))
            .order_by(Comment.created_at.desc())
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def create_post(self, user: User, data: CreatePostRequest) -> dict[str, Any]:
        post = Post(author_id=user.id, **data.model_dump())
        self.db.add(post)
        await self.db.commit()
        return format_post(await self._get_post(post.id), user.id)

    async def list_posts(
        self,
        viewer: User | None,
        sort_by: SortBy = "latest",
        search: str | None = None,
        tag: str | None = None,
    ) -> list[dict[str, Any]]:
        query = select(Post).options(*POST_LOAD_OPTIONS).where(Post.archived.is_(False))
        term = search.strip() if search else ""
        if term:
            pattern = f"%{term}%"
            query = query.where(
                or_(
                    Post.title.ilike(pattern),
                    Post.content.ilike(pattern),
                    json_array_contains(Post.tags, term, self.dialect),
                )
            )
        if tag:
            query = query.where(json_array_contains(Post.tags, tag, self.dialect))

        if sort_by == "most-viewed":
            query = query.order_by(Post.views.desc(), Post.created_at.desc())
        elif sort_by == "popular":
            likes = select(func.count(Like.id)).where(Like.post_id == Post.id).correlate(Post).scalar_subquery()
            query = query.order_by(likes.desc(), Post.created_at.desc())
        else:
            query = query.order_by(Post.created_at.desc())

        result = await self.db.execute(query.execution_options(populate_existing=True))
        viewer_id = viewer.id if viewer else None
        return [format_post(p, viewer_id) for p in result.scalars().all()]

    async def get_post(self, post_id: UUID, viewer: User | None) -> dict[str, Any]:
        """Fetch a post with its comment tree and count the view."""
        post = await self._get_post(post_id)

        if viewer is None:
            post.views += 1
        else:
            seen = await self.db.execute(
                select(PostView.id).where(PostView.post_id == post_id).where(PostView.user_id == viewer.id)
            )
            if seen.first() is None:
                self.db.add(PostView(post_id=post_id, user_id=viewer.id))
                post.views += 1
        await self.db.commit()

        viewer_id = viewer.id if viewer else None
        data = format_post(post, viewer_id)
        data["comments"] = [format_comment(c, viewer_id) for c in await self._top_level_comments(post_id)]
        return data

    async def list_user_posts(self, user: User, include_archived: bool = False) -> list[dict[str, Any]]:
        query = select(Post).options(*POST_LOAD_OPTIONS).where(Post.author_id == user.id)
        if not include_archived:
            query = query.where(Post.archived.is_(False))
        result = await self.db.execute(
            query.order_by(Post.created_at.desc()).execution_options(populate_existing=True)
        )
        return [format_post(p, user.id) for p in result.scalars().all()]

    async def list_saved_posts(self, user: User) -> list[dict[str, Any]]:
        result = await self.db.execute(
            select(SavedPost)
            .options(selectinload(SavedPost.post).options(*POST_LOAD_OPTIONS))
            .where(SavedPost.user_id == user.id)
            .order_by(SavedPost.created_at.desc())
            .execution_options(populate_existing=True)
        )
        return [format_post(saved.post, user.id) for saved in result.scalars().all()]

    async def related_posts(
        self, post_id: UUID, viewer: User | None = None, limit: int | None = None
    ) -> list[dict[str, Any]]:
        """Posts sharing one of the first five tags or the category, topped up with the newest posts."""
        limit = max(1, min(RELATED_DEFAULT_LIMIT if limit is None else limit, RELATED_MAX_LIMIT))
        post = await self._get_post(post_id)
        tags = (post.tags or [])[:5]

        base = (
            select(Post)
            .options(*POST_LOAD_OPTIONS)
            .where(Post.id != post_id)
            .where(Post.archived.is_(False))
            .order_by(Post.created_at.desc())
            .execution_options(populate_existing=True)
        )

        criteria = []
        if tags:
            criteria.append(json_array_overlaps(Post.tags, tags, self.dialect))
        if post.category:
            criteria.append(Post.category == post.category)

        related = []
        if criteria:
            result = await self.db.execute(base.where(or_(*criteria)).limit(limit))
            related = list(result.scalars().all())
        if len(related) < limit:
            query = base.limit(limit - len(related))
            if related:
                query = query.where(Post.id.not_in([p.id for p in related]))
            result = await self.db.execute(query)
            related.extend(result.scalars().all())

        viewer_id = viewer.id if viewer else None
        return [format_post(p, viewer_id) for p in related]

    async def update_post(self, post_id: UUID, user: User, data: UpdatePostRequest) -> dict[str, Any]:
        post = await self._get_owned_post(post_id, user)
        for field, value in data.model_dump(exclude_unset=True).items():
            if value is None and field in {"title", "content", "is_anonymous"}:
                continue
            setattr(post, field, value)
        await self.db.commit()
        return format_post(await self._get_post(post_id), user.id)

    async def delete_post(self, post_id: UUID, user: User) -> None:
        post = await self._get_owned_post(post_id, user)
        await self.db.delete(post)
        await self.db.commit()

    async def toggle_like(self, post_id: UUID, user: User) -> dict[str, Any]:
        post = await self._get_post(post_id)
        existing = next((like for like in post.likes if like.user_id == user.id), None)
        if existing:
            await self.db.delete(existing)
            liked = False
        else:
            self.db.add(Like(post_id=post_id, user_id=user.id))
            liked = True
        await self.db.commit()

        if liked and post.author_id != user.id:
            actor_name = user.full_name or user.username
            await self.notifications.notify(
                post.author_id,
                NotificationType.LIKE,
                "New Like",
                message=f"{actor_name} liked your post \"{post.title}\"",
                actor=user,
                target_type="post",
                target_id=str(post_id),
                link=f"/posts/{post_id}",
            )

        post = await self._get_post(post_id)
        return {"liked": liked, "likes_count": len(post.likes)}

    async def toggle_save(self, post_id: UUID, user: User) -> dict[str, bool]:
        post = await self._get_post(post_id)
        existing = next((save for save in post.saves if save.user_id == user.id), None)
        if existing:
            await self.db.delete(existing)
            saved = False
        else:
            self.db.add(SavedPost(post_id=post_id, user_id=user.id))
            saved = True
        await self.db.commit()
        return {"saved": saved}

    async def _increment(self, post_id: UUID, column: str) -> dict[str, Any]:
        await self._get_post(post_id)
        counter = getattr(Post, column)
        await self.db.execute(
            update(Post)
            .where(Post.id == post_id)
            .values({column: counter + 1})
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()
        post = await self._get_post(post_id)
        return {"id": str(post_id), "count": getattr(post, column)}

    async def share_post(self, post_id: UUID) -> dict[str, Any]:
        return await self._increment(post_id, "shares")

    async def record_view(self, post_id: UUID) -> dict[str, Any]:
        return await self._increment(post_id, "views")

    async def toggle_archive(self, post_id: UUID, user: User) -> dict[str, bool]:
        post = await self._get_owned_post(post_id, user)
        post.archived = not post.archived
        await self.db.commit()
        return {"archived": post.archived}

    # --- Comments ---

    async def list_comments(self, post_id: UUID, viewer: User | None) -> list[dict[str, Any]]:
        await self._get_post(post_id)
        viewer_id = viewer.id if viewer else None
        return [format_comment(c, viewer_id) for c in await self._top_level_comments(post_id)]

    async def add_comment(
        self, post_id: UUID, user: User, content: str, parent_id: UUID | None = None
    ) -> dict[str, Any]:
        post = await self._get_post(post_id)

        if parent_id is not None:
            parent = await self.db.get(Comment, parent_id)
            if not parent or parent.post_id != post_id:
                raise bad_request("Parent comment does not belong to this post")
            # Replies are one level deep
            if parent.parent_id is not None:
                parent_id = parent.parent_id

        comment = Comment(post_id=post_id, author_id=user.id, content=content, parent_id=parent_id)
        self.db.add(comment)
        await self.db.commit()
        comment_id = comment.id

        if post.author_id != user.id:
            actor_name = user.full_name or user.username
            await self.notifications.notify(
                post.author_id,
                NotificationType.COMMENT,
                "New Comment",
                message=f"{actor_name} commented on your post \"{post.title}\"",
                actor=user,
                target_type="post",
                target_id=str(post_id),
                link=f"/posts/{post_id}",
                payload={"comment_id": str(comment_id)},
            )

        result = await self.db.execute(
            select(Comment)
            .options(*COMMENT_LOAD_OPTIONS)
            .where(Comment.id == comment_id)
            .execution_options(populate_existing=True)
        )
        return format_comment(result.scalar_one(), user.id)

    async def toggle_comment_like(self, comment_id: UUID, user: User) -> dict[str, Any]:
        result = await self.db.execute(
            select(Comment)
            .options(selectinload(Comment.likes))
            .where(Comment.id == comment_id)
            .execution_options(populate_existing=True)
        )
        comment = result.scalar_one_or_none()
        if not comment:
            raise not_found("Comment not found")

        existing = next((like for like in comment.likes if like.user_id == user.id), None)
        if existing:
            await self.db.delete(existing)
            liked = False
        else:
            self.db.add(CommentLike(comment_id=comment_id, user_id=user.id))
            liked = True
        await self.db.commit()

        count = await self.db.execute(select(CommentLike.id).where(CommentLike.comment_id == comment_id))
        return {"liked": liked, "likes_count": len(count.all())}
