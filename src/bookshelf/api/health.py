"""Health check endpoint.

Learn: Simple GET endpoint that verifies the server is running
and the database is reachable.
"""

from fastapi import APIRouter, Depends

from bookshelf import __version__
from bookshelf.db.engine import Database, get_database

router = APIRouter()


@router.get("/health")
async def health_check(database: Database = Depends(get_database)):
    """Check server health and database connectivity."""
    checks = {"server": "ok", "version": __version__}

    try:
        await database.ping()
        checks["database"] = "ok"
    except Exception as e:
        checks["database"] = f"error: {type(e).__name__}"

    status = "healthy" if checks["database"] == "ok" else "degraded"
    return {"status": status, **checks}
