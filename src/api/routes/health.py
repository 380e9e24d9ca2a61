"""Health check endpoints."""

from datetime import datetime

import structlog
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from infrastructure.database.session import count_profiles, get_async_session

router = APIRouter(tags=["health"])
logger = structlog.get_logger()


class HealthResponse(BaseModel):
    """Health check response."""

    success: bool = True
    message: str
    status: str
    version: str
    timestamp: str
    environment: str
    database: str | None = None
    profiles: int | None = None


def _response(message: str, status: str, **extra: object) -> HealthResponse:
    return HealthResponse(
        message=message,
        status=status,
        version=settings.app_version,
        timestamp=datetime.utcnow().isoformat(),
        environment=settings.app_env,
        **extra,
    )


@router.get("/health", response_model=HealthResponse, summary="Basic health check")
async def health_check() -> HealthResponse:
    """Liveness probe polled by the offline-sync client before it replays changes."""
    return _response("Server is running", "healthy")


@router.get(
    "/health/detailed",
    response_model=HealthResponse,
    summary="Detailed health check",
)
async def detailed_health_check(
    db: AsyncSession = Depends(get_async_session),
) -> HealthResponse:
    """
    Readiness check: counts stored profiles.

    A store failure degrades the status instead of failing the request.
    """
    try:
        total = await count_profiles(db)
    except SQLAlchemyError as e:
        logger.warning("profile_store_unavailable", error=str(e))
        return _response(
            "Profile store unavailable",
            "degraded",
            database=f"unhealthy: {e.__class__.__name__}",
        )

    return _response("Profile store is reachable", "healthy", database="healthy", profiles=total)
