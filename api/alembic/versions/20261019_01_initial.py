"""Initial schema."""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "20261019_01_initial"
down_revision = None
branch_labels = None
depends_on = None


def _id() -> sa.Column:
    return sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True)


def _fk(name: str, table: str, ondelete: str = "CASCADE", nullable: bool = False) -> sa.Column:
    return sa.Column(
        name,
        postgresql.UUID(as_uuid=True),
        sa.ForeignKey(f"{table}.id", ondelete=ondelete),
        nullable=nullable,
    )


def _created_at() -> sa.Column:
    return sa.Column("created_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("NOW()"))


def _updated_at() -> sa.Column:
    return sa.Column("updated_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("NOW()"))


def _flag(name: str, default: str = "false") -> sa.Column:
    return sa.Column(name, sa.Boolean(), nullable=False, server_default=sa.text(default))


def _counter(name: str) -> sa.Column:
    return sa.Column(name, sa.Integer(), nullable=False, server_default=sa.text("0"))


def _jsonb(name: str) -> sa.Column:
    return sa.Column(name, postgresql.JSONB(), nullable=True)


def upgrade() -> None:
    op.create_table(
        "users",
        _id(),
        sa.Column("username", sa.String(30), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("full_name", sa.Text()),
        sa.Column("avatar_url", sa.Text()),
        sa.Column("cover_url", sa.Text()),
        sa.Column("bio", sa.Text()),
        sa.Column("role", sa.String(20), nullable=False, server_default="STUDENT"),
        sa.Column("major", sa.Text()),
        sa.Column("university", sa.Text()),
        sa.Column("country", sa.Text()),
        sa.Column("city", sa.Text()),
        sa.Column("academic_position", sa.Text()),
        sa.Column("highest_degree", sa.Text()),
        _jsonb("fields_of_study"),
        _jsonb("skills"),
        _jsonb("keywords"),
        _jsonb("preferred_languages"),
        sa.Column("phone", sa.Text()),
        sa.Column("website", sa.Text()),
        sa.Column("linkedin", sa.Text()),
        sa.Column("orcid", sa.Text()),
        sa.Column("google_scholar", sa.Text()),
        sa.Column("research_gate", sa.Text()),
        sa.Column("github", sa.Text()),
        _jsonb("custom_links"),
        _flag("is_verified"),
        _flag("is_suspended"),
        sa.Column("suspended_until", sa.TIMESTAMP(timezone=True)),
        sa.Column("suspension_reason", sa.Text()),
        _flag("is_banned"),
        sa.Column("banned_until", sa.TIMESTAMP(timezone=True)),
        sa.Column("ban_reason", sa.Text()),
        _flag("is_flagged"),
        sa.Column("flag_reason", sa.Text()),
        _counter("failed_login_count"),
        sa.Column("last_failed_at", sa.TIMESTAMP(timezone=True)),
        sa.Column("locked_until", sa.TIMESTAMP(timezone=True)),
        sa.Column("last_successful_at", sa.TIMESTAMP(timezone=True)),
        _created_at(),
        _updated_at(),
        sa.UniqueConstraint("username", name="uq_users_username"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )
    op.create_index("idx_users_role", "users", ["role"])
    op.create_index("idx_users_created", "users", ["created_at"])

    # --- Posts and comments ---

    op.create_table(
        "posts",
        _id(),
        _fk("author_id", "users"),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("category", sa.String(100)),
        _jsonb("tags"),
        _jsonb("image_urls"),
        _jsonb("file_urls"),
        _flag("is_anonymous"),
        _counter("views"),
        _counter("shares"),
        _flag("archived"),
        sa.Column("moderation_status", sa.String(20), nullable=False, server_default="PENDING"),
        _fk("reviewed_by", "users", ondelete="SET NULL", nullable=True),
        sa.Column("approved_at", sa.TIMESTAMP(timezone=True)),
        sa.Column("rejected_at", sa.TIMESTAMP(timezone=True)),
        sa.Column("rejection_reason", sa.Text()),
        _created_at(),
        _updated_at(),
    )
    op.create_index("idx_posts_author", "posts", ["author_id"])
    op.create_index("idx_posts_created", "posts", [sa.text("created_at DESC")])

    op.create_table(
        "post_views",
        _id(),
        _fk("post_id", "posts"),
        _fk("user_id", "users"),
        _created_at(),
        sa.UniqueConstraint("post_id", "user_id", name="uq_post_views_post_user"),
    )

    op.create_table(
        "likes",
        _id(),
        _fk("post_id", "posts"),
        _fk("user_id", "users"),
        _created_at(),
        sa.UniqueConstraint("post_id", "user_id", name="uq_likes_post_user"),
    )

    op.create_table(
        "saved_posts",
        _id(),
        _fk("post_id", "posts"),
        _fk("user_id", "users"),
        _created_at(),
        sa.UniqueConstraint("post_id", "user_id", name="uq_saved_posts_post_user"),
    )

    op.create_table(
        "comments",
        _id(),
        _fk("post_id", "posts"),
        _fk("author_id", "users"),
        _fk("parent_id", "comments", nullable=True),
        sa.Column("content", sa.Text(), nullable=False),
        _created_at(),
        _updated_at(),
    )
    op.create_index("idx_comments_post", "comments", ["post_id", "created_at"])

    op.create_table(
        "comment_likes",
        _id(),
        _fk("comment_id", "comments"),
        _fk("user_id", "users"),
        _created_at(),
        sa.UniqueConstraint("comment_id", "user_id", name="uq_comment_likes_comment_user"),
    )

    # --- Q&A ---

    op.create_table(
        "questions",
        _id(),
        _fk("author_id", "users"),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("category", sa.String(100)),
        _jsonb("tags"),
        _counter("views"),
        _flag("is_resolved"),
        _created_at(),
        _updated_at(),
    )
    op.create_index("idx_questions_created", "questions", [sa.text("created_at DESC")])

    op.create_table(
        "answers",
        _id(),
        _fk("question_id", "questions"),
        _fk("author_id", "users"),
        sa.Column("content", sa.Text(), nullable=False),
        _flag("is_accepted"),
        _created_at(),
        _updated_at(),
    )
    op.create_index("idx_answers_question", "answers", ["question_id"])

    op.create_table(
        "question_votes",
        _id(),
        _fk("question_id", "questions"),
        _fk("user_id", "users"),
        sa.Column("value", sa.Integer(), nullable=False),
        _created_at(),
        sa.UniqueConstraint("question_id", "user_id", name="uq_question_votes_question_user"),
        sa.CheckConstraint("value IN (-1, 1)", name="ck_question_votes_value"),
    )

    op.create_table(
        "answer_votes",
        _id(),
        _fk("answer_id", "answers"),
        _fk("user_id", "users"),
        sa.Column("value", sa.Integer(), nullable=False),
        _created_at(),
        sa.UniqueConstraint("answer_id", "user_id", name="uq_answer_votes_answer_user"),
        sa.CheckConstraint("value IN (-1, 1)", name="ck_answer_votes_value"),
    )

    # --- Collaborations ---

    op.create_table(
        "collaborations",
        _id(),
        _fk("owner_id", "users"),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("institution", sa.Text()),
        sa.Column("country", sa.Text()),
        sa.Column("city", sa.Text()),
        _flag("is_remote"),
        sa.Column("duration", sa.Text()),
        sa.Column("duration_months", sa.Integer()),
        sa.Column("deadline", sa.TIMESTAMP(timezone=True)),
        _jsonb("skills"),
        _jsonb("disciplines"),
        _jsonb("application_areas"),
        _jsonb("collaboration_type"),
        _jsonb("degree_level"),
        sa.Column("experience_years", sa.Text()),
        sa.Column("weekly_commitment", sa.Text()),
        _jsonb("work_languages"),
        _flag("has_funding"),
        _jsonb("funding_types"),
        _jsonb("methodology"),
        sa.Column("data_availability", sa.Text()),
        sa.Column("max_members", sa.Integer()),
        _counter("applicants_count"),
        sa.Column("status", sa.String(20), nullable=False, server_default="OPEN"),
        _created_at(),
        _updated_at(),
        sa.CheckConstraint("max_members IS NULL OR max_members >= 1", name="ck_collaborations_max_members"),
    )
    op.create_index("idx_collaborations_created", "collaborations", [sa.text("created_at DESC")])

    op.create_table(
        "collaboration_members",
        sa.Column(
            "collaboration_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("collaborations.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "user_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            primary_key=True,
        ),
    )

    op.create_table(
        "collaboration_applications",
        _id(),
        _fk("collaboration_id", "collaborations"),
        _fk("applicant_id", "users"),
        sa.Column("full_name", sa.Text()),
        sa.Column("institution", sa.Text()),
        sa.Column("email", sa.Text()),
        sa.Column("field", sa.Text()),
        sa.Column("cover_letter", sa.Text()),
        sa.Column("attachment", sa.Text()),
        sa.Column("message", sa.Text()),
        sa.Column("motivation", sa.Text()),
        _jsonb("skills"),
        sa.Column("status", sa.String(20), nullable=False, server_default="PENDING"),
        _created_at(),
        _updated_at(),
        sa.UniqueConstraint(
            "collaboration_id", "applicant_id", name="uq_collab_applications_collab_applicant"
        ),
    )

    # --- Messaging and notifications ---

    op.create_table(
        "messages",
        _id(),
        _fk("sender_id", "users", nullable=True),
        _fk("recipient_id", "users"),
        sa.Column("content", sa.Text(), nullable=False),
        _flag("is_read"),
        sa.Column("context_type", sa.String(50)),
        sa.Column("context_id", sa.String(64)),
        _jsonb("context_data"),
        _fk("reply_to_id", "messages", ondelete="SET NULL", nullable=True),
        _jsonb("attachments"),
        _created_at(),
    )
    op.create_index(
        "idx_messages_sender_recipient", "messages", ["sender_id", "recipient_id", "created_at"]
    )
    op.create_index("idx_messages_recipient_unread", "messages", ["recipient_id", "is_read"])

    op.create_table(
        "message_reactions",
        _id(),
        _fk("message_id", "messages"),
        _fk("user_id", "users"),
        sa.Column("emoji", sa.String(32), nullable=False),
        _created_at(),
        sa.UniqueConstraint(
            "message_id", "user_id", "emoji", name="uq_message_reactions_message_user_emoji"
        ),
    )

    op.create_table(
        "notifications",
        _id(),
        _fk("user_id", "users"),
        sa.Column("type", sa.String(30), nullable=False),
        _fk("actor_id", "users", ondelete="SET NULL", nullable=True),
        sa.Column("actor_name", sa.Text()),
        sa.Column("actor_avatar", sa.Text()),
        sa.Column("target_type", sa.String(50)),
        sa.Column("target_id", sa.String(64)),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("message", sa.Text()),
        sa.Column("link", sa.Text()),
        _jsonb("payload"),
        _flag("is_read"),
        _created_at(),
    )
    op.create_index("idx_notifications_user", "notifications", ["user_id", sa.text("created_at DESC")])
    op.create_index("idx_notifications_unread", "notifications", ["user_id", "is_read"])

    # --- Moderation ---

    op.create_table(
        "reports",
        _id(),
        _fk("reporter_id", "users"),
        sa.Column("target_type", sa.String(30), nullable=False),
        sa.Column("target_id", sa.String(64), nullable=False),
        sa.Column("type", sa.String(30), nullable=False),
        sa.Column("reason", sa.Text(), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("status", sa.String(20), nullable=False, server_default="PENDING"),
        _flag("is_resolved"),
        sa.Column("resolved_at", sa.TIMESTAMP(timezone=True)),
        _fk("resolved_by", "users", ondelete="SET NULL", nullable=True),
        _created_at(),
    )
    op.create_index("idx_reports_target", "reports", ["target_type", "target_id"])

    op.create_table(
        "admin_secrets",
        sa.Column("key", sa.String(100), primary_key=True),
        sa.Column("value", sa.Text(), nullable=False),
        _updated_at(),
    )

    op.create_table(
        "topic_suggestions",
        _id(),
        _fk("suggested_by", "users"),
        sa.Column("topic", sa.Text(), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("status", sa.String(20), nullable=False, server_default="PENDING"),
        _created_at(),
        _updated_at(),
    )

    op.create_table(
        "events",
        _id(),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("title_ar", sa.Text()),
        sa.Column("description", sa.Text()),
        sa.Column("description_ar", sa.Text()),
        sa.Column("type", sa.String(20), nullable=False, server_default="OTHER"),
        sa.Column("start_date", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("end_date", sa.TIMESTAMP(timezone=True)),
        sa.Column("location", sa.Text()),
        sa.Column("location_ar", sa.Text()),
        sa.Column("time", sa.String(50)),
        sa.Column("image_url", sa.Text()),
        _flag("is_active", "true"),
        _fk("created_by", "users", ondelete="SET NULL", nullable=True),
        _created_at(),
        _updated_at(),
    )
    op.create_index("idx_events_start", "events", ["start_date"])

    # --- Library and exam prep ---

    op.create_table(
        "library_resources",
        _id(),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("title_ar", sa.Text()),
        sa.Column("author", sa.Text(), nullable=False),
        sa.Column("author_ar", sa.Text()),
        sa.Column("institution", sa.Text()),
        sa.Column("institution_ar", sa.Text()),
        sa.Column("summary", sa.Text(), nullable=False),
        sa.Column("summary_ar", sa.Text()),
        sa.Column("discipline", sa.String(100), nullable=False),
        sa.Column("discipline_ar", sa.Text()),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("language", sa.String(10), nullable=False),
        sa.Column("file_url", sa.Text()),
        sa.Column("file_type", sa.String(50)),
        sa.Column("file_size", sa.Integer()),
        sa.Column("file_size_display", sa.String(20)),
        _jsonb("tags"),
        sa.Column("year", sa.Integer()),
        _flag("is_previewable", "true"),
        _flag("requires_login"),
        sa.Column("preview_url", sa.Text()),
        sa.Column("video_url", sa.Text()),
        sa.Column("thumbnail_url", sa.Text()),
        sa.Column("duration", sa.String(20)),
        sa.Column("duration_seconds", sa.Integer()),
        _counter("downloads"),
        _counter("views"),
        _created_at(),
        _updated_at(),
    )
    op.create_index("idx_library_type", "library_resources", ["type"])
    op.create_index("idx_library_created", "library_resources", [sa.text("created_at DESC")])

    op.create_table(
        "prep_resources",
        _id(),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("title_ar", sa.Text()),
        sa.Column("type", sa.String(50), nullable=False),
        sa.Column("type_ar", sa.Text()),
        sa.Column("exam_type", sa.String(10), nullable=False),
        _jsonb("sections"),
        sa.Column("provider", sa.Text()),
        sa.Column("language", sa.String(5), nullable=False),
        sa.Column("level", sa.String(20), nullable=False),
        _jsonb("access"),
        sa.Column("file_url", sa.Text()),
        sa.Column("file_type", sa.String(50)),
        sa.Column("file_size", sa.Integer()),
        sa.Column("file_size_mb", sa.Float()),
        sa.Column("download_url", sa.Text()),
        _flag("is_previewable", "true"),
        _flag("requires_login"),
        _counter("downloads"),
        _counter("views"),
        _created_at(),
        _updated_at(),
    )
    op.create_index("idx_prep_resources_exam", "prep_resources", ["exam_type"])

    op.create_table(
        "prep_videos",
        _id(),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("title_ar", sa.Text()),
        sa.Column("instructor", sa.Text()),
        sa.Column("instructor_ar", sa.Text()),
        sa.Column("exam_type", sa.String(10), nullable=False),
        _jsonb("sections"),
        sa.Column("provider", sa.Text()),
        sa.Column("language", sa.String(5), nullable=False),
        sa.Column("level", sa.String(20), nullable=False),
        _jsonb("access"),
        sa.Column("video_url", sa.Text(), nullable=False),
        sa.Column("embed_url", sa.Text()),
        sa.Column("video_type", sa.String(20)),
        sa.Column("duration", sa.String(20)),
        sa.Column("duration_seconds", sa.Integer()),
        sa.Column("duration_min", sa.Integer()),
        sa.Column("thumbnail_url", sa.Text()),
        sa.Column("captions_url", sa.Text()),
        _counter("views"),
        _created_at(),
        _updated_at(),
    )
    op.create_index("idx_prep_videos_exam", "prep_videos", ["exam_type"])


def downgrade() -> None:
    for table in (
        "prep_videos",
        "prep_resources",
        "library_resources",
        "events",
        "topic_suggestions",
        "admin_secrets",
        "reports",
        "notifications",
        "message_reactions",
        "messages",
        "collaboration_applications",
        "collaboration_members",
        "collaborations",
        "answer_votes",
        "question_votes",
        "answers",
        "questions",
        "comment_likes",
        "comments",
        "saved_posts",
        "likes",
        "post_views",
        "posts",
        "users",
    ):
        op.drop_table(table)
