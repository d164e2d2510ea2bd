"""Test fixtures for weighted_search tests."""

import os

# Set ENVIRONMENT before importing any modules that use infrastructure_config
os.environ.setdefault("ENVIRONMENT", "test")

import pytest  # noqa: E402

from weighted_search.db.content import ContentStore  # noqa: E402
from weighted_search.db.search import ensure_db  # noqa: E402
from helpers import FIELDS  # noqa: E402


@pytest.fixture
def clean_env(monkeypatch):
    """Clean environment variables for testing."""
    for var in ["DATABASE_URL", "SEARCH_DB", "DEFAULT_LOCALE", "MAX_QUERY_LEN"]:
        monkeypatch.delenv(var, raising=False)
    yield


@pytest.fixture
def test_db_path(tmp_path, clean_env):
    """Provide a temporary SQLite database with the schema applied."""
    db_file = str(tmp_path / "test.db")
    ensure_db(db_file)
    return db_file


@pytest.fixture
def content_store(test_db_path):
    """Content store with sections and field definitions."""
    store = ContentStore(test_db_path)
    store.save_section(1, "articles")
    store.save_section(2, "products")
    for field in FIELDS.values():
        store.save_field(field)
    return store
