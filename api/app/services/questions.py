"""Q&A service: questions, answers, vote toggling and accepted answers."""

from typing import Any, Literal
from uuid import UUID

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.errors import forbidden, not_found
from app.models.question import Answer, AnswerVote, Question, QuestionVote
from app.models.types import as_utc, json_array_contains, json_array_overlaps
from app.models.user import User
from app.schemas.common import author_summary
from app.schemas.questions import CreateQuestionRequest

SortBy = Literal["newest", "active", "votes", "views", "unanswered"]

QUESTION_LOAD_OPTIONS = (
    selectinload(Question.author),
    selectinload(Question.votes),
    selectinload(Question.answers),
)

ANSWER_LOAD_OPTIONS = (
    selectinload(Answer.author),
    selectinload(Answer.votes),
)

RELATED_LIMIT = 5


def vote_state(votes, viewer_id: UUID | None) -> tuple[int, int]:
    """Return (score, viewer's vote) for a list of vote rows."""
    score = sum(v.value for v in votes)
    user_vote = 0
    if viewer_id is not None:
        user_vote = next((v.value for v in votes if v.user_id == viewer_id), 0)
    return score, user_vote


def last_activity(question: Question):
    times = [as_utc(a.created_at) for a in question.answers]
    return max(times) if times else as_utc(question.created_at)


def format_question(question: Question, viewer_id: UUID | None = None) -> dict[str, Any]:
    score, user_vote = vote_state(question.votes, viewer_id)
    return {
        "id": str(question.id),
        "title": question.title,
        "content": question.content,
        "category": question.category,
        "tags": question.tags or [],
        "views": question.views,
        "is_resolved": question.is_resolved,
        "author": author_summary(question.author),
        "answers_count": len(question.answers),
        "vote_score": score,
        "user_vote": user_vote,
        "has_accepted_answer": any(a.is_accepted for a in question.answers),
        "last_activity_at": last_activity(question),
        "created_at": question.created_at,
        "updated_at": question.updated_at,
    }


def format_answer(answer: Answer, viewer_id: UUID | None = None) -> dict[str, Any]:
    score, user_vote = vote_state(answer.votes, viewer_id)
    return {
        "id": str(answer.id),
        "question_id": str(answer.question_id),
        "content": answer.content,
        "is_accepted": answer.is_accepted,
        "author": author_summary(answer.author),
        "vote_score": score,
        "user_vote": user_vote,
        "created_at": answer.created_at,
        "updated_at": answer.updated_at,
    }


class QuestionService:
    """Service for questions and answers."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.dialect = db.bind.dialect.name

    async def _get_question(self, question_id: UUID) -> Question:
        result = await self.db.execute(
            select(Question)
            .options(*QUESTION_LOAD_OPTIONS)
            .where(Question.id == question_id)
            .execution_options(populate_existing=True)
        )
        question = result.scalar_one_or_none()
        if not question:
            raise not_found("Question not found")
        return question

    async def _get_answer(self, answer_id: UUID) -> Answer:
        result = await self.db.execute(
            select(Answer)
            .options(*ANSWER_LOAD_OPTIONS, selectinload(Answer.question))
            .where(Answer.id == answer_id)
            .execution_options(populate_existing=True)
        )
        answer = result.scalar_one_or_none()
        if not answer:
            raise not_found("Answer not found")
        return answer

    async def create_question(self, user: User, data: CreateQuestionRequest) -> dict[str, Any]:
        question = Question(author_id=user.id, **data.model_dump())
        self.db.add(question)
        await self.db.commit()
        return format_question(await self._get_question(question.id), user.id)

    async def list_questions(
        self,
        viewer: User | None,
        sort_by: SortBy = "newest",
        search: str | None = None,
        tag: str | None = None,
        category: str | None = None,
    ) -> list[dict[str, Any]]:
        query = select(Question).options(*QUESTION_LOAD_OPTIONS)
        if category:
            query = query.where(Question.category == category)
        term = search.strip() if search else ""
        if term:
            pattern = f"%{term}%"
            query = query.where(
                or_(
                    Question.title.ilike(pattern),
                    Question.content.ilike(pattern),
                    json_array_contains(Question.tags, term, self.dialect),
                )
            )
        if tag:
            query = query.where(json_array_contains(Question.tags, tag, self.dialect))
        if sort_by == "unanswered":
            query = query.where(~Question.answers.any())

        if sort_by == "views":
            query = query.order_by(Question.views.desc(), Question.created_at.desc())
        elif sort_by == "votes":
            score = (
                select(func.coalesce(func.sum(QuestionVote.value), 0))
                .where(QuestionVote.question_id == Question.id)
                .correlate(Question)
                .scalar_subquery()
            )
            query = query.order_by(score.desc(), Question.created_at.desc())
        else:
            query = query.order_by(Question.created_at.desc())

        result = await self.db.execute(query.execution_options(populate_existing=True))
        questions = list(result.scalars().all())
        if sort_by == "active":
            # Latest answer time needs the loaded answers; newest-first order breaks ties
            questions.sort(key=last_activity, reverse=True)

        viewer_id = viewer.id if viewer else None
        return [format_question(q, viewer_id) for q in questions]

    async def get_question(self, question_id: UUID, viewer: User | None) -> dict[str, Any]:
        """Fetch a question with its answers (accepted first, then newest) and count the view."""
        question = await self._get_question(question_id)
        question.views += 1
        await self.db.commit()

        result = await self.db.execute(
            select(Answer)
            .options(*ANSWER_LOAD_OPTIONS)
            .where(Answer.question_id == question_id)
            .order_by(Answer.is_accepted.desc(), Answer.created_at.desc())
            .execution_options(populate_existing=True)
        )
        viewer_id = viewer.id if viewer else None
        data = format_question(question, viewer_id)
        data["answers"] = [format_answer(a, viewer_id) for a in result.scalars().all()]
        return data

    async def create_answer(self, question_id: UUID, user: User, content: str) -> dict[str, Any]:
        await self._get_question(question_id)
        answer = Answer(question_id=question_id, author_id=user.id, content=content)
        self.db.add(answer)
        await self.db.commit()
        return format_answer(await self._get_answer(answer.id), user.id)

    async def _toggle_vote(self, model, owner_column: str, owner_id: UUID, user: User, value: int) -> dict[str, Any]:
        """
        Cast, flip or withdraw a vote.

        The same value twice removes the vote; the opposite value replaces it.
        """
        owner_attr = getattr(model, owner_column)
        result = await self.db.execute(
            select(model).where(owner_attr == owner_id).where(model.user_id == user.id)
        )
        existing = result.scalar_one_or_none()
        if existing is None:
            self.db.add(model(**{owner_column: owner_id, "user_id": user.id, "value": value}))
        elif existing.value == value:
            await self.db.delete(existing)
        else:
            existing.value = value
        await self.db.commit()

        votes = await self.db.execute(
            select(model).where(owner_attr == owner_id).execution_options(populate_existing=True)
        )
        score, user_vote = vote_state(votes.scalars().all(), user.id)
        return {"voted": user_vote != 0, "value": user_vote, "vote_score": score, "user_vote": user_vote}

    async def vote_question(self, question_id: UUID, user: User, value: int) -> dict[str, Any]:
        await self._get_question(question_id)
        return await self._toggle_vote(QuestionVote, "question_id", question_id, user, value)

    async def vote_answer(self, answer_id: UUID, user: User, value: int) -> dict[str, Any]:
        await self._get_answer(answer_id)
        return await self._toggle_vote(AnswerVote, "answer_id", answer_id, user, value)

    async def accept_answer(self, answer_id: UUID, user: User) -> dict[str, Any]:
        answer = await self._get_answer(answer_id)
        if answer.question.author_id != user.id:
            raise forbidden("Only the question author can accept answers")

        await self.db.execute(
            update(Answer)
            .where(Answer.question_id == answer.question_id)
            .where(Answer.id != answer_id)
            .values(is_accepted=False)
        )
        answer.is_accepted = True
        answer.question.is_resolved = True
        await self.db.commit()
        return {"accepted": True, "message": "Answer accepted"}

    async def delete_question(self, question_id: UUID, user: User) -> None:
        question = await self._get_question(question_id)
        if question.author_id != user.id:
            raise forbidden("You can only delete your own questions")
        await self.db.delete(question)
        await self.db.commit()

    async def delete_answer(self, answer_id: UUID, user: User) -> None:
        answer = await self._get_answer(answer_id)
        if answer.author_id != user.id:
            raise forbidden("You can only delete your own answers")
        await self.db.delete(answer)
        await self.db.commit()

    async def related_questions(self, question_id: UUID) -> list[dict[str, Any]]:
        """Up to five questions sharing a tag or the category, most viewed first."""
        question = await self._get_question(question_id)
        criteria = []
        if question.tags:
            criteria.append(json_array_overlaps(Question.tags, list(question.tags), self.dialect))
        if question.category:
            criteria.append(Question.category == question.category)
        if not criteria:
            return []

        result = await self.db.execute(
            select(Question)
            .options(*QUESTION_LOAD_OPTIONS)
            .where(Question.id != question_id)
            .where(or_(*criteria))
            .order_by(Question.views.desc(), Question.created_at.desc())
            .limit(RELATED_LIMIT)
            .execution_options(populate_existing=True)
        )
        return [format_question(q) for q in result.scalars().all()]
