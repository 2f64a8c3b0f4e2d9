"""Health check endpoints.

Learn: Simple GET endpoints that verify the server is running
and the database is reachable.
"""

from fastapi import APIRouter, Request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from inkwell import __version__

router = APIRouter()


@router.get("/")
async def root():
    return {
        "message": "Welcome to the Inkwell blog backend!",
        "status": "Server is running",
    }


@router.get("/api/health")
async def health_check(request: Request):
    """Check server health and database connectivity."""
    checks = {"server": "ok", "version": __version__}

    try:
        async with request.app.state.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except (SQLAlchemyError, OSError) as e:
        checks["database"] = f"error: {e}"

    status = "healthy" if checks["database"] == "ok" else "degraded"
    return {"status": status, **checks}
