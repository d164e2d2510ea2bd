"""Search API Router - JSON endpoint for weighted substring search."""

import logging
import sqlite3

import psycopg2
from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from weighted_search.api.models import SearchResponse, SearchResultItem
from weighted_search.core.config import settings
from weighted_search.search.searcher import SearchEngine

logger = logging.getLogger(__name__)

router = APIRouter()


def get_search_engine() -> SearchEngine:
    """Engine backed by the configured database."""
    return SearchEngine.for_database(settings.DB_PATH)


@router.get("/search", response_model=SearchResponse)
def api_search(
    q: str | None = None,
    sections: list[str] = Query(default=[]),
    locale: str | None = None,
    engine: SearchEngine = Depends(get_search_engine),
):
    """
    Search records for a substring.

    Results are ordered by score. `sections` may be repeated to restrict
    the search; unknown section handles are ignored.
    """
    query = (q or "").strip()
    if len(query) > settings.MAX_QUERY_LEN:
        query = query[: settings.MAX_QUERY_LEN]
    locale = locale or settings.DEFAULT_LOCALE

    if not query:
        return SearchResponse(query=query, locale=locale, total=0, results=[])

    try:
        results = engine.search(query, locale, sections)
    except (sqlite3.Error, psycopg2.Error) as e:
        logger.error(f"Search failed for '{query}': {e}", exc_info=True)
        return JSONResponse(
            {"detail": "Search is temporarily unavailable"}, status_code=503
        )

    return SearchResponse(
        query=query,
        locale=locale,
        total=len(results),
        results=[SearchResultItem.from_result(r) for r in results],
    )
