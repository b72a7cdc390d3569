"""Health check endpoints."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, status
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from paye_engine.api.dependencies import DbSession, Engine
from paye_engine.services.settings_service import (
    ActiveSettingsNotFoundError,
    SettingsService,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    timestamp: datetime
    engine_version: str
    database: str
    settings: str  # "configured", "missing" or "unknown"


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
)
async def health_check(db: DbSession, engine: Engine) -> HealthResponse:
    """Check the database and whether a settings version is active.

    A service without active settings can still preview with inline rules,
    so missing settings degrade the status rather than fail it.
    """
    db_status = "unhealthy"
    settings_status = "unknown"
    try:
        await db.execute(text("SELECT 1"))
        db_status = "healthy"
        await SettingsService(db).get_active()
        settings_status = "configured"
    except ActiveSettingsNotFoundError:
        settings_status = "missing"
    except (SQLAlchemyError, OSError):
        logger.warning("Database health check failed", exc_info=True)

    healthy = db_status == "healthy" and settings_status == "configured"
    return HealthResponse(
        status="healthy" if healthy else "degraded",
        timestamp=datetime.now(timezone.utc),
        engine_version=engine.engine_version,
        database=db_status,
        settings=settings_status,
    )


@router.get("/ready", status_code=status.HTTP_200_OK)
async def readiness_check() -> dict[str, str]:
    """Readiness check for container orchestration."""
    return {"status": "ready"}


@router.get("/live", status_code=status.HTTP_200_OK)
async def liveness_check() -> dict[str, str]:
    """Liveness check for container orchestration."""
    return {"status": "alive"}
