"""
Weighted Search - FastAPI Application

Read-only JSON API over the weighted substring search.
"""

import logging
import os
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from weighted_search.api.middleware.request_logging import RequestLoggingMiddleware
from weighted_search.api.routers import health, search
from weighted_search.core.config import settings
from weighted_search.db.search import ensure_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: setup and teardown."""
    # --- DB Initialization ---
    db_dir = os.path.dirname(settings.DB_PATH)
    if db_dir:
        os.makedirs(db_dir, exist_ok=True)
    ensure_db(settings.DB_PATH)
    logger.info(f"{settings.APP_NAME} {settings.APP_VERSION} started")
    yield


# --- FastAPI Application ---
app = FastAPI(
    lifespan=lifespan,
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Substring search ranked by title/field matches and prioritized terms.",
    openapi_tags=[
        {"name": "search", "description": "Search endpoints"},
        {"name": "health", "description": "Health check endpoints"},
    ],
)

# --- Middleware ---
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)

# --- Routers ---
app.include_router(health.router, tags=["health"])
app.include_router(search.router, prefix="/api/v1", tags=["search"])


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG if settings.DEBUG else logging.INFO)
    uvicorn.run(
        "weighted_search.api.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
