"""Test the search HTTP API."""

import sqlite3
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from weighted_search.api.main import app
from weighted_search.api.routers.search import get_search_engine
from weighted_search.models import Record
from weighted_search.search.indexer import SearchIndexer
from weighted_search.search.searcher import SearchEngine


@pytest.fixture
def test_client(test_db_path, content_store):
    """TestClient whose search engine uses the temporary database."""
    indexer = SearchIndexer(test_db_path)
    indexer.index_record(
        Record(
            id=1,
            title="Contact",
            section_id=1,
            url="/contact",
            fields={"summary": "Call <us> & write"},
        )
    )
    indexer.index_record(
        Record(id=2, title="Shop", section_id=2, fields={"summary": "contact the shop"})
    )

    app.dependency_overrides[get_search_engine] = lambda: SearchEngine.for_database(
        test_db_path, default_locale="en"
    )
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestSearchAPI:
    """Test GET /api/v1/search."""

    def test_search_results(self, test_client):
        response = test_client.get("/api/v1/search", params={"q": "contact"})

        assert response.status_code == 200
        data = response.json()
        assert data["query"] == "contact"
        assert data["locale"] == "en"
        assert data["total"] == 2
        assert [r["id"] for r in data["results"]] == [1, 2]
        assert data["results"][0] == {
            "id": 1,
            "title": "Contact",
            "url": "/contact",
            "excerpt": "",
            "score": 10000,
        }
        assert data["results"][1]["excerpt"] == "<mark>contact</mark> the shop"
        assert data["results"][1]["score"] == 1
        assert data["results"][1]["url"] is None

    def test_excerpt_is_escaped(self, test_client):
        response = test_client.get("/api/v1/search", params={"q": "write"})

        data = response.json()
        assert data["results"][0]["excerpt"] == "Call &lt;us&gt; &amp; <mark>write</mark>"

    def test_section_filter(self, test_client):
        response = test_client.get(
            "/api/v1/search", params=[("q", "contact"), ("sections", "products")]
        )

        assert [r["id"] for r in response.json()["results"]] == [2]

    def test_empty_query(self, test_client):
        response = test_client.get("/api/v1/search", params={"q": "   "})

        assert response.status_code == 200
        assert response.json()["total"] == 0
        assert response.json()["results"] == []

    def test_missing_query(self, test_client):
        response = test_client.get("/api/v1/search")
        assert response.status_code == 200
        assert response.json()["total"] == 0

    def test_other_locale(self, test_client):
        response = test_client.get("/api/v1/search", params={"q": "contact", "locale": "nb"})
        data = response.json()
        assert data["locale"] == "nb"
        assert data["total"] == 0

    def test_backend_failure_returns_503(self, test_client):
        """A failing store must not be reported as 'no results'."""
        failing = MagicMock()
        failing.search.side_effect = sqlite3.OperationalError("database is locked")
        app.dependency_overrides[get_search_engine] = lambda: failing

        response = test_client.get("/api/v1/search", params={"q": "contact"})

        assert response.status_code == 503
        assert "unavailable" in response.json()["detail"]

    def test_programming_error_is_not_reported_as_unavailable(self, test_client):
        broken = MagicMock()
        broken.search.side_effect = TypeError("unexpected argument")
        app.dependency_overrides[get_search_engine] = lambda: broken

        with pytest.raises(TypeError):
            test_client.get("/api/v1/search", params={"q": "contact"})

    def test_request_id_header(self, test_client):
        response = test_client.get("/api/v1/search", headers={"X-Request-ID": "abc123"})
        assert response.headers["X-Request-ID"] == "abc123"


class TestHealth:
    def test_health(self, test_client):
        response = test_client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_ready(self, test_client, test_db_path):
        with patch("weighted_search.api.routers.health.settings.DB_PATH", test_db_path):
            response = test_client.get("/health/ready")

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "checks": {"database": True}}

    def test_ready_degraded(self, test_client):
        with patch(
            "weighted_search.api.routers.health.get_connection",
            side_effect=sqlite3.OperationalError("unable to open database file"),
        ):
            response = test_client.get("/health/ready")

        assert response.status_code == 503
        assert response.json() == {"status": "degraded", "checks": {"database": False}}
