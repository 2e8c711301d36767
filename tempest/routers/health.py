from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from tempest.core.config import settings
from tempest.core.db import get_db

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    summary="Service health check",
    description="Reports the service name and environment. Does **not** touch the observation store.",
    response_description="Service status",
)
def health():
    return {
        "status": "ok",
        "service": settings.app_name,
        "environment": settings.environment,
    }


@router.get(
    "/health/db",
    summary="Observation store health check",
    description=(
        "Runs `SELECT 1` against the observation store. A failure usually means the "
        "SQLite file is missing or unwritable, or `DATABASE_URL` points at the wrong place."
    ),
    response_description="Database connection status",
)
async def health_db(db: AsyncSession = Depends(get_db)):
    """
    **Returns:**
    - `status`: `ok` if the query executes successfully
    - `db`: `ok` if the store answered
    """
    await db.execute(text("SELECT 1"))
    return {"status": "ok", "db": "ok"}
