"""Tests for /api/v1/questions Q&A endpoints."""

from uuid import uuid4

from httpx import AsyncClient

QUESTION_BODY = "How should I structure a literature review for a thesis chapter?"
ANSWER_BODY = "Start with a concept map and group sources by theme, not by date."


async def _ask(client: AsyncClient, headers: dict, **overrides) -> dict:
    payload = {
        "title": "Literature review structure",
        "content": QUESTION_BODY,
        "category": "writing",
        "tags": ["thesis"],
    }
    payload.update(overrides)
    response = await client.post("/api/v1/questions", json=payload, headers=headers)
    assert response.status_code == 201
    return response.json()


async def _answer(client: AsyncClient, question_id: str, headers: dict) -> dict:
    response = await client.post(
        f"/api/v1/questions/{question_id}/answers", json={"content": ANSWER_BODY}, headers=headers
    )
    assert response.status_code == 201
    return response.json()


class TestAskQuestion:
    """POST /api/v1/questions."""

    async def test_create_question(self, async_client: AsyncClient, test_user: dict, auth_headers):
        question = await _ask(async_client, auth_headers(test_user))
        assert question["answers_count"] == 0
        assert question["vote_score"] == 0
        assert question["is_resolved"] is False
        assert question["author"]["username"] == "testuser"

    async def test_short_title_returns_422(
        self, async_client: AsyncClient, test_user: dict, auth_headers
    ):
        response = await async_client.post(
            "/api/v1/questions",
            json={"title": "Too short", "content": QUESTION_BODY},
            headers=auth_headers(test_user),
        )
        assert response.status_code == 422

    async def test_short_answer_returns_422(
        self, async_client: AsyncClient, test_user: dict, auth_headers
    ):
        headers = auth_headers(test_user)
        question = await _ask(async_client, headers)
        response = await async_client.post(
            f"/api/v1/questions/{question['id']}/answers", json={"content": "Too short"}, headers=headers
        )
        assert response.status_code == 422


class TestListQuestions:
    """GET /api/v1/questions sorting and filtering."""

    async def test_unanswered_filter(
        self, async_client: AsyncClient, test_user: dict, second_user: dict, auth_headers
    ):
        headers = auth_headers(test_user)
        answered = await _ask(async_client, headers, title="Answered question here")
        await _ask(async_client, headers, title="Open question without answers")
        await _answer(async_client, answered["id"], auth_headers(second_user))

        response = await async_client.get("/api/v1/questions", params={"sort_by": "unanswered"})
        assert [q["title"] for q in response.json()] == ["Open question without answers"]

    async def test_votes_sort(
        self, async_client: AsyncClient, test_user: dict, second_user: dict, auth_headers
    ):
        headers = auth_headers(test_user)
        upvoted = await _ask(async_client, headers, title="Upvoted question title")
        await _ask(async_client, headers, title="Newer question title")
        await async_client.post(
            f"/api/v1/questions/{upvoted['id']}/vote", json={"value": 1}, headers=auth_headers(second_user)
        )

        response = await async_client.get("/api/v1/questions", params={"sort_by": "votes"})
        assert response.json()[0]["id"] == upvoted["id"]

    async def test_active_sort_uses_latest_answer(
        self, async_client: AsyncClient, test_user: dict, second_user: dict, auth_headers
    ):
        headers = auth_headers(test_user)
        older = await _ask(async_client, headers, title="Older question title")
        await _ask(async_client, headers, title="Newer question title")
        await _answer(async_client, older["id"], auth_headers(second_user))

        response = await async_client.get("/api/v1/questions", params={"sort_by": "active"})
        assert response.json()[0]["id"] == older["id"]

    async def test_category_and_search_filters(
        self, async_client: AsyncClient, test_user: dict, auth_headers
    ):
        headers = auth_headers(test_user)
        await _ask(async_client, headers, title="Statistics for survey data", category="methods")
        await _ask(async_client, headers, title="Formatting a bibliography", category="writing")

        by_category = await async_client.get("/api/v1/questions", params={"category": "methods"})
        assert [q["category"] for q in by_category.json()] == ["methods"]

        by_search = await async_client.get("/api/v1/questions", params={"search": "bibliography"})
        assert [q["title"] for q in by_search.json()] == ["Formatting a bibliography"]

    async def test_tag_filter_and_search_by_tag(
        self, async_client: AsyncClient, test_user: dict, auth_headers
    ):
        headers = auth_headers(test_user)
        await _ask(async_client, headers, title="Choosing a journal", tags=["publishing"])
        await _ask(async_client, headers, title="Citation counts", tags=["bibliometrics"])

        by_tag = await async_client.get("/api/v1/questions", params={"tag": "publishing"})
        assert [q["title"] for q in by_tag.json()] == ["Choosing a journal"]

        # exact tag match counts as a search hit
        by_search = await async_client.get("/api/v1/questions", params={"search": "bibliometrics"})
        assert [q["title"] for q in by_search.json()] == ["Citation counts"]


class TestQuestionDetail:
    """GET /api/v1/questions/{id}."""

    async def test_every_read_counts_a_view(
        self, async_client: AsyncClient, test_user: dict, auth_headers
    ):
        question = await _ask(async_client, auth_headers(test_user))
        await async_client.get(f"/api/v1/questions/{question['id']}")
        response = await async_client.get(f"/api/v1/questions/{question['id']}")
        assert response.json()["views"] == 2

    async def test_accepted_answer_listed_first(
        self, async_client: AsyncClient, test_user: dict, second_user: dict, auth_headers
    ):
        author = auth_headers(test_user)
        question = await _ask(async_client, author)
        first = await _answer(async_client, question["id"], auth_headers(second_user))
        await _answer(async_client, question["id"], auth_headers(second_user))
        await async_client.post(f"/api/v1/questions/answers/{first['id']}/accept", headers=author)

        response = await async_client.get(f"/api/v1/questions/{question['id']}")
        data = response.json()
        assert data["answers"][0]["id"] == first["id"]
        assert data["answers"][0]["is_accepted"] is True
        assert data["is_resolved"] is True
        assert data["has_accepted_answer"] is True

    async def test_missing_question_returns_404(self, async_client: AsyncClient):
        response = await async_client.get(f"/api/v1/questions/{uuid4()}")
        assert response.status_code == 404


class TestVoting:
    """Vote toggling on questions and answers."""

    async def test_same_vote_twice_withdraws(
        self, async_client: AsyncClient, test_user: dict, second_user: dict, auth_headers
    ):
        question = await _ask(async_client, auth_headers(test_user))
        voter = auth_headers(second_user)
        url = f"/api/v1/questions/{question['id']}/vote"

        cast = await async_client.post(url, json={"value": 1}, headers=voter)
        assert cast.json() == {"voted": True, "value": 1, "vote_score": 1, "user_vote": 1}

        withdrawn = await async_client.post(url, json={"value": 1}, headers=voter)
        assert withdrawn.json() == {"voted": False, "value": 0, "vote_score": 0, "user_vote": 0}

    async def test_opposite_vote_flips(
        self, async_client: AsyncClient, test_user: dict, second_user: dict, auth_headers
    ):
        question = await _ask(async_client, auth_headers(test_user))
        answer = await _answer(async_client, question["id"], auth_headers(test_user))
        voter = auth_headers(second_user)
        url = f"/api/v1/questions/answers/{answer['id']}/vote"

        await async_client.post(url, json={"value": 1}, headers=voter)
        flipped = await async_client.post(url, json={"value": -1}, headers=voter)
        assert flipped.json()["vote_score"] == -1
        assert flipped.json()["user_vote"] == -1

    async def test_invalid_vote_value_returns_422(
        self, async_client: AsyncClient, test_user: dict, auth_headers
    ):
        headers = auth_headers(test_user)
        question = await _ask(async_client, headers)
        response = await async_client.post(
            f"/api/v1/questions/{question['id']}/vote", json={"value": 2}, headers=headers
        )
        assert response.status_code == 422


class TestAcceptAndDelete:
    """Ownership rules for accepting and deleting."""

    async def test_only_question_author_can_accept(
        self, async_client: AsyncClient, test_user: dict, second_user: dict, auth_headers
    ):
        question = await _ask(async_client, auth_headers(test_user))
        answer = await _answer(async_client, question["id"], auth_headers(second_user))

        response = await async_client.post(
            f"/api/v1/questions/answers/{answer['id']}/accept", headers=auth_headers(second_user)
        )
        assert response.status_code == 403

    async def test_accepting_another_answer_moves_the_flag(
        self, async_client: AsyncClient, test_user: dict, second_user: dict, auth_headers
    ):
        author = auth_headers(test_user)
        question = await _ask(async_client, author)
        first = await _answer(async_client, question["id"], auth_headers(second_user))
        second = await _answer(async_client, question["id"], auth_headers(second_user))

        await async_client.post(f"/api/v1/questions/answers/{first['id']}/accept", headers=author)
        await async_client.post(f"/api/v1/questions/answers/{second['id']}/accept", headers=author)

        response = await async_client.get(f"/api/v1/questions/{question['id']}")
        accepted = [a["id"] for a in response.json()["answers"] if a["is_accepted"]]
        assert accepted == [second["id"]]

    async def test_delete_question_by_non_author_is_forbidden(
        self, async_client: AsyncClient, test_user: dict, second_user: dict, auth_headers
    ):
        question = await _ask(async_client, auth_headers(test_user))
        response = await async_client.delete(
            f"/api/v1/questions/{question['id']}", headers=auth_headers(second_user)
        )
        assert response.status_code == 403

    async def test_delete_own_answer(
        self, async_client: AsyncClient, test_user: dict, second_user: dict, auth_headers
    ):
        question = await _ask(async_client, auth_headers(test_user))
        answer = await _answer(async_client, question["id"], auth_headers(second_user))

        response = await async_client.delete(
            f"/api/v1/questions/answers/{answer['id']}", headers=auth_headers(second_user)
        )
        assert response.status_code == 200

        detail = await async_client.get(f"/api/v1/questions/{question['id']}")
        assert detail.json()["answers_count"] == 0


class TestRelatedQuestions:
    """GET /api/v1/questions/{id}/related."""

    async def test_related_by_tag_or_category(
        self, async_client: AsyncClient, test_user: dict, auth_headers
    ):
        headers = auth_headers(test_user)
        source = await _ask(async_client, headers, tags=["thesis"], category="writing")
        same_tag = await _ask(async_client, headers, title="Thesis defense tips please", tags=["thesis"], category="x")
        await _ask(async_client, headers, title="Unrelated lab question", tags=["lab"], category="y")

        response = await async_client.get(f"/api/v1/questions/{source['id']}/related")
        assert [q["id"] for q in response.json()] == [same_tag["id"]]
