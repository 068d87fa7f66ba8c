"""Q&A models: questions, answers and their votes."""

import uuid

from sqlalchemy import (
    Boolean,
    CheckConstraint,
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


class Question(Base):
    __tablename__ = "questions"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    author_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    title = Column(Text, nullable=False)
    content = Column(Text, nullable=False)
    category = Column(String(100))
    tags = Column(JSONType, default=list)
    views = Column(Integer, nullable=False, default=0, server_default=text("0"))
    is_resolved = Column(Boolean, nullable=False, default=False, server_default=text("false"))
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, server_default=func.now())

    __table_args__ = (Index("idx_questions_created", created_at.desc()),)

    author = relationship("User", foreign_keys=[author_id])
    answers = relationship(
        "Answer",
        back_populates="question",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    votes = relationship("QuestionVote", cascade="all, delete-orphan", passive_deletes=True)


class Answer(Base):
    __tablename__ = "answers"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    question_id = Column(GUID, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False)
    author_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    content = Column(Text, nullable=False)
    is_accepted = Column(Boolean, nullable=False, default=False, server_default=text("false"))
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, server_default=func.now())

    __table_args__ = (Index("idx_answers_question", question_id),)

    question = relationship("Question", back_populates="answers")
    author = relationship("User", foreign_keys=[author_id])
    votes = relationship("AnswerVote", cascade="all, delete-orphan", passive_deletes=True)


class QuestionVote(Base):
    """A user's +1/-1 on a question."""

    __tablename__ = "question_votes"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    question_id = Column(GUID, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    value = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())

    __table_args__ = (
        UniqueConstraint("question_id", "user_id", name="uq_question_votes_question_user"),
        CheckConstraint("value IN (-1, 1)", name="ck_question_votes_value"),
    )


class AnswerVote(Base):
    """A user's +1/-1 on an answer."""

    __tablename__ = "answer_votes"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    answer_id = Column(GUID, ForeignKey("answers.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    value = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())

    __table_args__ = (
        UniqueConstraint("answer_id", "user_id", name="uq_answer_votes_answer_user"),
        CheckConstraint("value IN (-1, 1)", name="ck_answer_votes_value"),
    )
