"""Deleting content removes the rows that hang off it."""

from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.collaboration import CollaborationApplication, collaboration_members
from app.models.message import Message, MessageReaction
from app.models.post import Comment, CommentLike, Like, PostView, SavedPost
from app.models.question import Answer, AnswerVote, QuestionVote


async def _count(db_session: AsyncSession, table) -> int:
    return await db_session.scalar(select(func.count()).select_from(table))


class TestPostDelete:
    async def test_children_are_removed(
        self,
        async_client: AsyncClient,
        db_session: AsyncSession,
        test_user: dict,
        second_user: dict,
        auth_headers,
    ):
        owner, reader = auth_headers(test_user), auth_headers(second_user)
        response = await async_client.post(
            "/api/v1/posts", json={"title": "Lab safety", "content": "Updated lab rules."}, headers=owner
        )
        post_id = response.json()["id"]

        response = await async_client.post(
            f"/api/v1/posts/{post_id}/comments", json={"content": "Thanks"}, headers=reader
        )
        comment_id = response.json()["id"]
        await async_client.post(
            f"/api/v1/posts/{post_id}/comments",
            json={"content": "You're welcome", "parent_id": comment_id},
            headers=owner,
        )
        await async_client.post(f"/api/v1/posts/comments/{comment_id}/like", headers=owner)
        await async_client.post(f"/api/v1/posts/{post_id}/like", headers=reader)
        await async_client.post(f"/api/v1/posts/{post_id}/save", headers=reader)
        await async_client.get(f"/api/v1/posts/{post_id}", headers=reader)

        for table, expected in ((Comment, 2), (CommentLike, 1), (Like, 1), (SavedPost, 1), (PostView, 1)):
            assert await _count(db_session, table.__table__) == expected

        response = await async_client.delete(f"/api/v1/posts/{post_id}", headers=owner)
        assert response.status_code == 200

        for table in (Comment, CommentLike, Like, SavedPost, PostView):
            assert await _count(db_session, table.__table__) == 0


class TestQuestionDelete:
    async def test_answers_and_votes_are_removed(
        self,
        async_client: AsyncClient,
        db_session: AsyncSession,
        test_user: dict,
        second_user: dict,
        auth_headers,
    ):
        asker, answerer = auth_headers(test_user), auth_headers(second_user)
        response = await async_client.post(
            "/api/v1/questions",
            json={
                "title": "How do I cite a dataset?",
                "content": "Which citation style fits datasets from the ministry portal?",
            },
            headers=asker,
        )
        question_id = response.json()["id"]

        response = await async_client.post(
            f"/api/v1/questions/{question_id}/answers",
            json={"content": "Use the DataCite format with the portal's DOI when one exists."},
            headers=answerer,
        )
        answer_id = response.json()["id"]
        await async_client.post(f"/api/v1/questions/{question_id}/vote", json={"value": 1}, headers=answerer)
        await async_client.post(f"/api/v1/questions/answers/{answer_id}/vote", json={"value": 1}, headers=asker)

        assert await _count(db_session, QuestionVote.__table__) == 1
        assert await _count(db_session, AnswerVote.__table__) == 1

        response = await async_client.delete(f"/api/v1/questions/{question_id}", headers=asker)
        assert response.status_code == 200

        for table in (Answer, QuestionVote, AnswerVote):
            assert await _count(db_session, table.__table__) == 0


class TestCollaborationDelete:
    async def test_applications_and_members_are_removed(
        self,
        async_client: AsyncClient,
        db_session: AsyncSession,
        test_user: dict,
        second_user: dict,
        auth_headers,
    ):
        owner = auth_headers(test_user)
        response = await async_client.post(
            "/api/v1/collaborations",
            json={"title": "Olive yield model", "description": "Forecasting harvests from weather data."},
            headers=owner,
        )
        collaboration_id = response.json()["id"]

        response = await async_client.post(
            f"/api/v1/collaborations/{collaboration_id}/apply",
            json={
                "full_name": "Second User",
                "institution": "An-Najah University",
                "email": "second@example.com",
                "field": "Agronomy",
                "cover_message": "I maintain the faculty weather station.",
            },
            headers=auth_headers(second_user),
        )
        application_id = response.json()["id"]
        response = await async_client.patch(
            f"/api/v1/collaborations/applications/{application_id}/status",
            json={"status": "ACCEPTED"},
            headers=owner,
        )
        assert response.status_code == 200
        assert await _count(db_session, collaboration_members) == 1

        response = await async_client.delete(f"/api/v1/collaborations/{collaboration_id}", headers=owner)
        assert response.status_code == 200

        assert await _count(db_session, CollaborationApplication.__table__) == 0
        assert await _count(db_session, collaboration_members) == 0


class TestConversationDelete:
    async def test_messages_and_reactions_are_removed(
        self,
        async_client: AsyncClient,
        db_session: AsyncSession,
        test_user: dict,
        second_user: dict,
        auth_headers,
    ):
        response = await async_client.post(
            "/api/v1/messages/send",
            json={"recipient_id": second_user["user_id"], "content": "Are the slides ready?"},
            headers=auth_headers(test_user),
        )
        message_id = response.json()["id"]
        await async_client.post(
            "/api/v1/messages/send",
            json={"recipient_id": test_user["user_id"], "content": "Yes, uploading now."},
            headers=auth_headers(second_user),
        )
        await async_client.post(
            f"/api/v1/messages/{message_id}/react", json={"emoji": "👍"}, headers=auth_headers(second_user)
        )
        assert await _count(db_session, MessageReaction.__table__) == 1

        response = await async_client.delete(
            f"/api/v1/messages/conversation/{second_user['user_id']}", headers=auth_headers(test_user)
        )
        assert response.status_code == 200

        assert await _count(db_session, Message.__table__) == 0
        assert await _count(db_session, MessageReaction.__table__) == 0
