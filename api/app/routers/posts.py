"""Posts router for the feed, comments, likes and saves."""

from typing import Literal
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_user, get_optional_user
from app.database import get_db
from app.models.user import User
from app.schemas.common import CounterResponse, StatusResponse
from app.schemas.posts import (
    ArchiveToggleResponse,
    CommentRequest,
    CommentResponse,
    CreatePostRequest,
    LikeToggleResponse,
    PostDetailResponse,
    PostResponse,
    SaveToggleResponse,
    UpdatePostRequest,
)
from app.services.posts import PostService

router = APIRouter(prefix="/api/v1/posts", tags=["Posts"])


def get_post_service(db: AsyncSession = Depends(get_db)) -> PostService:
    return PostService(db)


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    data: CreatePostRequest,
    user: User = Depends(get_current_user),
    service: PostService = Depends(get_post_service),
):
    """Create a new post."""
    return await service.create_post(user, data)


@router.get("", response_model=list[PostResponse])
async def list_posts(
    sort_by: Literal["latest", "popular", "most-viewed"] = Query(default="latest"),
    search: str | None = Query(default=None),
    tag: str | None = Query(default=None),
    user: User | None = Depends(get_optional_user),
    service: PostService = Depends(get_post_service),
):
    """
    List the public feed.

    Archived posts are excluded. Sort by `latest`, `popular` (likes) or `most-viewed`.
    """
    return await service.list_posts(user, sort_by=sort_by, search=search, tag=tag)


@router.get("/user/my-posts", response_model=list[PostResponse])
async def list_my_posts(
    include_archived: bool = Query(default=False),
    user: User = Depends(get_current_user),
    service: PostService = Depends(get_post_service),
):
    return await service.list_user_posts(user, include_archived=include_archived)


@router.get("/user/saved", response_model=list[PostResponse])
async def list_saved_posts(
    user: User = Depends(get_current_user),
    service: PostService = Depends(get_post_service),
):
    return await service.list_saved_posts(user)


@router.post("/comments/{comment_id}/like", response_model=LikeToggleResponse)
async def toggle_comment_like(
    comment_id: UUID,
    user: User = Depends(get_current_user),
    service: PostService = Depends(get_post_service),
):
    return await service.toggle_comment_like(comment_id, user)


@router.get("/{post_id}", response_model=PostDetailResponse)
async def get_post(
    post_id: UUID,
    user: User | None = Depends(get_optional_user),
    service: PostService = Depends(get_post_service),
):
    """
    Get a post with its comments.

    Signed-in readers count as one view each; anonymous reads always count.
    """
    return await service.get_post(post_id, user)


@router.get("/{post_id}/related", response_model=list[PostResponse])
async def related_posts(
    post_id: UUID,
    limit: int | None = Query(default=None),
    user: User | None = Depends(get_optional_user),
    service: PostService = Depends(get_post_service),
):
    """Related posts; `limit` is clamped to 1..12."""
    return await service.related_posts(post_id, user, limit)


@router.patch("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: UUID,
    data: UpdatePostRequest,
    user: User = Depends(get_current_user),
    service: PostService = Depends(get_post_service),
):
    return await service.update_post(post_id, user, data)


@router.delete("/{post_id}", response_model=StatusResponse)
async def delete_post(
    post_id: UUID,
    user: User = Depends(get_current_user),
    service: PostService = Depends(get_post_service),
):
    await service.delete_post(post_id, user)
    return StatusResponse(message="Post deleted")


@router.post("/{post_id}/like", response_model=LikeToggleResponse)
async def toggle_like(
    post_id: UUID,
    user: User = Depends(get_current_user),
    service: PostService = Depends(get_post_service),
):
    return await service.toggle_like(post_id, user)


@router.post("/{post_id}/save", response_model=SaveToggleResponse)
async def toggle_save(
    post_id: UUID,
    user: User = Depends(get_current_user),
    service: PostService = Depends(get_post_service),
):
    return await service.toggle_save(post_id, user)


@router.post("/{post_id}/share", response_model=CounterResponse)
async def share_post(post_id: UUID, service: PostService = Depends(get_post_service)):
    return await service.share_post(post_id)


@router.post("/{post_id}/view", response_model=CounterResponse)
async def record_view(post_id: UUID, service: PostService = Depends(get_post_service)):
    return await service.record_view(post_id)


@router.post("/{post_id}/archive", response_model=ArchiveToggleResponse)
async def toggle_archive(
    post_id: UUID,
    user: User = Depends(get_current_user),
    service: PostService = Depends(get_post_service),
):
    return await service.toggle_archive(post_id, user)


@router.get("/{post_id}/comments", response_model=list[CommentResponse])
async def list_comments(
    post_id: UUID,
    user: User | None = Depends(get_optional_user),
    service: PostService = Depends(get_post_service),
):
    return await service.list_comments(post_id, user)


@router.post("/{post_id}/comments", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def add_comment(
    post_id: UUID,
    data: CommentRequest,
    user: User = Depends(get_current_user),
    service: PostService = Depends(get_post_service),
):
    """Add a comment, or a reply when `parent_id` is set."""
    return await service.add_comment(post_id, user, data.content, data.parent_id)
