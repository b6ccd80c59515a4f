"""Health check routes."""

import logging

from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from jobly.core.database import get_engine
from jobly.schemas.v1.health import HealthResponse, ReadyResponse

router = APIRouter(tags=["health"])
logger = logging.getLogger(__name__)


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Basic health check."""
    return HealthResponse(status="ok")


@router.get("/health/ready", response_model=ReadyResponse)
async def readiness_check():
    """Readiness check against the database."""
    database_ok = False
    try:
        async with get_engine().connect() as conn:
            await conn.execute(text("SELECT 1"))
        database_ok = True
    except (SQLAlchemyError, OSError) as exc:
        logger.exception(
            "Health readiness DB check failed",
            extra={"route": "/api/v1/health/ready", "error": str(exc)},
        )

    return ReadyResponse(status="ready" if database_ok else "degraded", database=database_ok)
