"""
Search Database Module

Schema definitions and connection handling for the content tables and the
keyword search index.

Supports both:
- PostgreSQL (production): Set DATABASE_URL environment variable
- Local SQLite (development): Uses SEARCH_DB path or default
"""

import os
from typing import Any

from weighted_search.core.infrastructure_config import settings, Environment

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS sections (
  id INTEGER PRIMARY KEY,
  handle TEXT NOT NULL UNIQUE
);

CREATE TABLE IF NOT EXISTS fields (
  id INTEGER PRIMARY KEY,
  handle TEXT NOT NULL UNIQUE,
  type TEXT NOT NULL
);

-- ============================================
-- Content Tables
-- ============================================

CREATE TABLE IF NOT EXISTS records (
  id INTEGER NOT NULL,
  locale TEXT NOT NULL,
  section_id INTEGER,
  status TEXT NOT NULL DEFAULT 'live',
  title TEXT NOT NULL DEFAULT '',
  url TEXT,
  PRIMARY KEY (id, locale)
);
CREATE INDEX IF NOT EXISTS idx_records_section ON records(section_id);

CREATE TABLE IF NOT EXISTS record_fields (
  record_id INTEGER NOT NULL,
  locale TEXT NOT NULL,
  handle TEXT NOT NULL,
  value TEXT,
  PRIMARY KEY (record_id, locale, handle)
);

-- Manual relevance overrides
CREATE TABLE IF NOT EXISTS record_search_terms (
  record_id INTEGER NOT NULL,
  locale TEXT NOT NULL,
  term TEXT NOT NULL,
  PRIMARY KEY (record_id, locale, term)
);

-- ============================================
-- Keyword Search Index
-- ============================================

CREATE TABLE IF NOT EXISTS searchindex (
  record_id INTEGER NOT NULL,
  attribute TEXT NOT NULL,       -- 'title' or 'field'
  field_id INTEGER NOT NULL DEFAULT 0,
  locale TEXT NOT NULL,
  keywords TEXT NOT NULL,        -- normalized text
  PRIMARY KEY (record_id, attribute, field_id, locale)
);
CREATE INDEX IF NOT EXISTS idx_searchindex_locale ON searchindex(locale);
"""

# SQLite schema for local development
SQLITE_SCHEMA_SQL = """
PRAGMA journal_mode=WAL;
PRAGMA synchronous=NORMAL;
""" + SCHEMA_SQL


def is_postgres_mode() -> bool:
    """Check if we're using PostgreSQL."""
    return os.getenv("DATABASE_URL") is not None


def sql_placeholder() -> str:
    """Return parameter placeholder for current database driver."""
    return "%s" if is_postgres_mode() else "?"


def sql_placeholders(count: int) -> str:
    """Return comma-separated placeholders for IN clauses."""
    if count <= 0:
        raise ValueError("count must be greater than zero")
    ph = sql_placeholder()
    return ",".join([ph] * count)


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so the value matches literally (use with ESCAPE '\\')."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def get_connection(db_path: str | None = None) -> Any:
    """Get database connection (PostgreSQL or local SQLite).

    Args:
        db_path: Optional path to SQLite database. Ignored if DATABASE_URL is set.

    Returns a connection object.
    - If DATABASE_URL is set: connects to PostgreSQL (production)
    - Otherwise: connects to local SQLite (development/test only)

    Raises:
        RuntimeError: If ENVIRONMENT is 'production' but DATABASE_URL is not set.
    """
    database_url = os.getenv("DATABASE_URL")

    if settings.ENVIRONMENT == Environment.PRODUCTION and not database_url:
        raise RuntimeError(
            "DATABASE_URL is required in production environment. "
            "Set DATABASE_URL environment variable."
        )

    if database_url:
        # PostgreSQL (production)
        import psycopg2

        return psycopg2.connect(database_url)
    else:
        # Local SQLite (development)
        import sqlite3

        path = db_path or os.getenv("SEARCH_DB", settings.DB_PATH)
        return sqlite3.connect(path)


def _execute_schema_statements(con: Any, schema: str) -> None:
    """Execute schema statements one by one for PostgreSQL compatibility."""
    cur = con.cursor()
    statements = [s.strip() for s in schema.split(";") if s.strip()]
    # Serialize schema initialization across multi-worker startup.
    lock_id = 514207731
    cur.execute("SELECT pg_advisory_lock(%s)", (lock_id,))
    try:
        for stmt in statements:
            cur.execute(stmt)
        con.commit()
    except Exception:
        con.rollback()
        raise
    finally:
        cur.execute("SELECT pg_advisory_unlock(%s)", (lock_id,))
        con.commit()
        cur.close()


def open_db(path: str = settings.DB_PATH) -> Any:
    """Open database connection and ensure schema exists.

    Note: If DATABASE_URL is set, the path parameter is ignored
    and PostgreSQL connection is used instead.
    """
    con = get_connection(path)

    if is_postgres_mode():
        _execute_schema_statements(con, SCHEMA_SQL)
    else:
        con.executescript(SQLITE_SCHEMA_SQL)

    return con


def ensure_db(path: str = settings.DB_PATH) -> None:
    """Ensure database file exists with correct schema."""
    con = open_db(path)
    con.close()
