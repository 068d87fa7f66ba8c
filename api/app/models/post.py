"""Post models: posts, comments, likes, saves and views."""

import enum
import uuid

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
    text,
)
from sqlalchemy.orm import relationship

from app.database import Base
from app.models.types import GUID, JSONType, utcnow


class ModerationStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class Post(Base):
    """User post shown in the feed."""

    __tablename__ = "posts"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    author_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    title = Column(Text, nullable=False)
    content = Column(Text, nullable=False)
    category = Column(String(100))
    tags = Column(JSONType, default=list)
    image_urls = Column(JSONType, default=list)
    file_urls = Column(JSONType, default=list)
    is_anonymous = Column(Boolean, nullable=False, default=False, server_default=text("false"))
    views = Column(Integer, nullable=False, default=0, server_default=text("0"))
    shares = Column(Integer, nullable=False, default=0, server_default=text("0"))
    archived = Column(Boolean, nullable=False, default=False, server_default=text("false"))

    moderation_status = Column(
        String(20),
        nullable=False,
        default=ModerationStatus.PENDING.value,
        server_default="PENDING",
    )
    reviewed_by = Column(GUID, ForeignKey("users.id", ondelete="SET NULL"))
    approved_at = Column(DateTime(timezone=True))
    rejected_at = Column(DateTime(timezone=True))
    rejection_reason = Column(Text)

    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, server_default=func.now())

    __table_args__ = (
        Index("idx_posts_author", author_id),
        Index("idx_posts_created", created_at.desc()),
    )

    author = relationship("User", foreign_keys=[author_id])
    likes = relationship("Like", cascade="all, delete-orphan", passive_deletes=True)
    saves = relationship("SavedPost", back_populates="post", cascade="all, delete-orphan", passive_deletes=True)
    comments = relationship(
        "Comment",
        back_populates="post",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class PostView(Base):
    """One row per authenticated viewer of a post."""

    __tablename__ = "post_views"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    post_id = Column(GUID, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())

    __table_args__ = (UniqueConstraint("post_id", "user_id", name="uq_post_views_post_user"),)


class Like(Base):
    __tablename__ = "likes"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    post_id = Column(GUID, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())

    __table_args__ = (UniqueConstraint("post_id", "user_id", name="uq_likes_post_user"),)


class SavedPost(Base):
    __tablename__ = "saved_posts"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    post_id = Column(GUID, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())

    __table_args__ = (UniqueConstraint("post_id", "user_id", name="uq_saved_posts_post_user"),)

    post = relationship("Post", back_populates="saves")


class Comment(Base):
    """Comment on a post; replies point at a top-level parent."""

    __tablename__ = "comments"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    post_id = Column(GUID, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False)
    author_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    parent_id = Column(GUID, ForeignKey("comments.id", ondelete="CASCADE"))
    content = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, server_default=func.now())

    __table_args__ = (Index("idx_comments_post", post_id, created_at),)

    post = relationship("Post", back_populates="comments")
    author = relationship("User", foreign_keys=[author_id])
    likes = relationship("CommentLike", cascade="all, delete-orphan", passive_deletes=True)
    replies = relationship(
        "Comment",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Comment.created_at",
    )


class CommentLike(Base):
    __tablename__ = "comment_likes"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    comment_id = Column(GUID, ForeignKey("comments.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())

    __table_args__ = (UniqueConstraint("comment_id", "user_id", name="uq_comment_likes_comment_user"),)
