"""
Tests for the FastAPI endpoints.

Services are swapped through app.dependency_overrides so no request reaches
PubMed, DOAJ or the LLM.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from src.api import main
from src.api.main import (
    app,
    get_answer_service,
    get_article_generator,
    get_article_repository,
    get_pubmed_client,
)
from src.articles import ArticleCreate, GenerationReport, InMemoryArticleRepository, sample_articles
from src.research.chat_session import ERROR_MESSAGE
from src.research.models import ResearchRecord
from src.research.services.answer_service import ResearchAnswer
from src.utils.config import Settings, get_settings


@pytest.fixture
def answer_service():
    service = MagicMock()
    service.answer = AsyncMock(return_value=ResearchAnswer(
        query="Why do tantrums happen?",
        answer="**Overview**\nTantrums are common.",
        sources=[ResearchRecord(id="pmid:1", title="Tantrums in toddlers", year=2020)],
        follow_up_questions=["What are the warning signs before a tantrum starts?"],
        is_personal=False,
    ))
    return service


@pytest.fixture
def repository():
    return InMemoryArticleRepository(seed=sample_articles())


@pytest.fixture
def client(answer_service, repository):
    app.dependency_overrides[get_answer_service] = lambda: answer_service
    app.dependency_overrides[get_article_repository] = lambda: repository
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestHealth:
    """Tests for /health."""

    def test_health(self, client):
        """Health reports status and version."""
        response = client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["version"] == "1.0.0"
        assert isinstance(body["llm_configured"], bool)


class TestResearchEndpoints:
    """Tests for the research endpoints."""

    def test_research_answer(self, client, answer_service):
        """The answer payload is returned as produced by the service."""
        response = client.post("/api/v1/research", json={"message": "  Why do tantrums happen? "})

        assert response.status_code == 200
        body = response.json()
        assert body["answer"].startswith("**Overview**")
        assert body["sources"][0]["id"] == "pmid:1"
        assert body["sources"][0]["authors"] == "N/A"
        assert body["is_personal"] is False
        answer_service.answer.assert_awaited_once_with("Why do tantrums happen?")

    def test_blank_message(self, client):
        """Whitespace-only messages are rejected."""
        assert client.post("/api/v1/research", json={"message": "   "}).status_code == 400

    def test_missing_message(self, client):
        """A body without a message fails validation."""
        assert client.post("/api/v1/research", json={}).status_code == 422

    def test_service_error(self, client, answer_service):
        """Service failures map to 500 with the user-facing message."""
        answer_service.answer.side_effect = RuntimeError("boom")

        response = client.post("/api/v1/research", json={"message": "naps"})

        assert response.status_code == 500
        assert response.json()["detail"] == ERROR_MESSAGE

    def test_follow_ups(self, client):
        """Follow-ups are classified and chosen from the query."""
        response = client.get("/api/v1/research/follow-ups", params={"query": "my toddler won't sleep"})

        body = response.json()
        assert body["is_personal"] is True
        assert body["follow_up_questions"][0] == "Can you help me with a specific situation?"


class TestAssessmentEndpoints:
    """Tests for the assessment endpoints."""

    def test_list(self, client):
        """All three assessments are listed."""
        ids = {a["id"] for a in client.get("/api/v1/assessments").json()}
        assert ids == {"dass-21", "parenting-stress", "relationship-satisfaction"}

    def test_detail(self, client):
        """The definition includes its questions."""
        body = client.get("/api/v1/assessments/parenting-stress").json()
        assert len(body["questions"]) == 5

    def test_unknown(self, client):
        """Unknown assessments are 404."""
        assert client.get("/api/v1/assessments/nope").status_code == 404
        assert client.post("/api/v1/assessments/nope/score", json={"answers": {}}).status_code == 404

    def test_score(self, client):
        """A complete answer set is scored into its band."""
        answers = {f"q{i}": 3 for i in range(1, 6)}

        response = client.post("/api/v1/assessments/parenting-stress/score", json={"answers": answers})

        assert response.status_code == 200
        body = response.json()
        assert body["total_score"] == 15
        assert body["band"]["label"] == "Moderate Stress"

    def test_score_dass_subscales(self, client):
        """DASS-21 results include subscale scores."""
        answers = {f"q{i}": 1 for i in range(1, 22)}

        body = client.post("/api/v1/assessments/dass-21/score", json={"answers": answers}).json()

        assert body["total_score"] == 21
        assert set(body["subscale_scores"]) == {"depression", "anxiety", "stress"}

    def test_incomplete(self, client):
        """Missing answers are 400 with the missing ids."""
        response = client.post("/api/v1/assessments/parenting-stress/score", json={"answers": {"q1": 3}})

        assert response.status_code == 400
        assert response.json()["detail"]["missing_question_ids"] == ["q2", "q3", "q4", "q5"]

    def test_invalid_value(self, client):
        """An undeclared option value is 400."""
        answers = {f"q{i}": 3 for i in range(1, 6)}
        answers["q1"] = 9

        response = client.post("/api/v1/assessments/parenting-stress/score", json={"answers": answers})

        assert response.status_code == 400


class TestArticleEndpoints:
    """Tests for the article endpoints."""

    def test_list_featured(self, client):
        """Featured articles are listed newest first."""
        body = client.get("/api/v1/articles").json()
        assert [a["id"] for a in body] == ["sample_1", "sample_2"]

    def test_list_invalid_status(self, client):
        """An unknown status filter is 400."""
        assert client.get("/api/v1/articles", params={"status": "hidden"}).status_code == 400

    def test_create_and_get(self, client):
        """Created articles are drafts and can be fetched by id."""
        response = client.post("/api/v1/articles", json={"title": "Naps", "content": "Nap guidance"})

        assert response.status_code == 201
        created = response.json()
        assert created["status"] == "draft"
        assert client.get(f"/api/v1/articles/{created['id']}").json()["title"] == "Naps"

    def test_stats_route(self, client):
        """/stats is not captured by the article id route."""
        assert client.get("/api/v1/articles/stats").json() == {"draft": 0, "featured": 2, "archived": 0}

    def test_missing_article(self, client):
        """Unknown ids are 404."""
        assert client.get("/api/v1/articles/nope").status_code == 404

    def test_update_status(self, client, repository):
        """PATCH moves an article to the new status."""
        response = client.patch("/api/v1/articles/sample_1/status", json={"status": "archived"})

        assert response.json() == {"success": True, "id": "sample_1", "status": "archived"}
        assert repository.stats()["archived"] == 1

    def test_update_invalid_status(self, client):
        """An invalid status is 400 with the allowed values."""
        response = client.patch("/api/v1/articles/sample_1/status", json={"status": "published"})

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid status. Must be draft, featured, or archived"

    def test_update_missing_article(self, client):
        """A valid status for an unknown id is 404."""
        assert client.patch("/api/v1/articles/nope/status", json={"status": "draft"}).status_code == 404

    def test_archive_oldest(self, client):
        """The oldest featured article is archived."""
        body = client.post("/api/v1/articles/archive-oldest", params={"count": 1}).json()

        assert body == {"archived": 1}
        assert [a["id"] for a in client.get("/api/v1/articles", params={"status": "archived"}).json()] == ["sample_2"]


class TestResearchBrowse:
    """Tests for the research browser endpoints."""

    def test_categories(self, client):
        """'All' comes first, then the browse categories."""
        categories = client.get("/api/v1/research/browse/categories").json()
        assert categories[0] == "All"
        assert "Sleep" in categories

    def test_browse(self, client):
        """Category and search are passed to PubMed and the result returned."""
        pubmed = MagicMock()
        pubmed.browse.return_value = {
            "articles": [{
                "pmid": "1",
                "title": "Bedtime routines",
                "abstract": "Routines help.",
                "authors": ["Jodi Mindell"],
                "journal": "Sleep",
                "year": "2021",
                "doi": None,
                "keywords": ["sleep"],
                "url": "https://pubmed.ncbi.nlm.nih.gov/1/",
            }],
            "total_count": 42,
            "search_term": "child sleep bedtime routines family routines",
        }
        app.dependency_overrides[get_pubmed_client] = lambda: pubmed

        response = client.get("/api/v1/research/browse", params={"category": "Sleep", "limit": 5})

        assert response.status_code == 200
        assert response.json()["total_count"] == 42
        assert response.json()["articles"][0]["keywords"] == ["sleep"]
        pubmed.browse.assert_called_once_with("Sleep", "", 5)


class TestArticleGeneration:
    """Tests for POST /api/v1/articles/generate."""

    def _generator(self, repository):
        async def generate_weekly(repo, topic_count=3, archive_count=3):
            saved = repo.create(ArticleCreate(title="Calm bedtimes", content="# Calm bedtimes"))
            return GenerationReport(articles=[saved], archived=repo.archive_oldest_featured(archive_count))

        generator = MagicMock()
        generator.generate_weekly = AsyncMock(side_effect=generate_weekly)
        return generator

    def test_requires_secret_when_configured(self, client, repository):
        """A configured cron secret must be presented as a bearer token."""
        app.dependency_overrides[get_settings] = lambda: Settings(_env_file=None, cron_secret="s3cret")
        app.dependency_overrides[get_article_generator] = lambda: self._generator(repository)

        assert client.post("/api/v1/articles/generate").status_code == 401
        assert client.post(
            "/api/v1/articles/generate", headers={"Authorization": "Bearer wrong"}
        ).status_code == 401

        response = client.post("/api/v1/articles/generate", headers={"Authorization": "Bearer s3cret"})
        assert response.status_code == 200

    def test_generation_run(self, client, repository):
        """New drafts are reported and the oldest featured articles archived."""
        app.dependency_overrides[get_settings] = lambda: Settings(_env_file=None, cron_secret=None)
        app.dependency_overrides[get_article_generator] = lambda: self._generator(repository)

        body = client.post("/api/v1/articles/generate").json()

        assert body["success"] is True
        assert body["new_articles"] == 1
        assert body["archived_articles"] == 2
        assert body["articles"][0]["status"] == "draft"
        assert repository.stats() == {"draft": 1, "featured": 0, "archived": 2}

    def test_unavailable_without_llm(self, client):
        """Without an LLM the job is unavailable."""
        app.dependency_overrides[get_settings] = lambda: Settings(_env_file=None, cron_secret=None)
        app.dependency_overrides[get_article_generator] = lambda: None

        assert client.post("/api/v1/articles/generate").status_code == 503


class TestCloseServices:
    """Tests for releasing services on shutdown."""

    def test_close_services(self, monkeypatch):
        """Every service with close() is closed, failures are logged, and the registry is emptied."""
        answer_service, pubmed, broken = MagicMock(), MagicMock(), MagicMock()
        broken.close.side_effect = RuntimeError("already closed")
        registry = {"answer_service": answer_service, "pubmed": pubmed, "broken": broken, "articles": object()}
        monkeypatch.setattr(main, "_services", registry)

        main.close_services()

        answer_service.close.assert_called_once()
        pubmed.close.assert_called_once()
        assert registry == {}
