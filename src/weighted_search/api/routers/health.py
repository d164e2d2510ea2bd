"""
Health Check Router

- /health: Simple health for load balancers
- /health/ready: Readiness check (database reachable)
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from weighted_search.core.config import settings
from weighted_search.db.search import get_connection

router = APIRouter()


@router.get("/health")
async def health():
    """Simple health check for load balancers."""
    return {"status": "ok"}


@router.get("/health/ready")
async def readiness():
    """Readiness check: is the database reachable?"""
    checks = {}
    try:
        conn = get_connection(settings.DB_PATH)
        try:
            cur = conn.cursor()
            cur.execute("SELECT 1")
            cur.close()
        finally:
            conn.close()
        checks["database"] = True
    except Exception:
        checks["database"] = False

    all_ok = all(checks.values())
    return JSONResponse(
        {"status": "ok" if all_ok else "degraded", "checks": checks},
        status_code=200 if all_ok else 503,
    )
