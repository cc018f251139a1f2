"""Health check endpoints."""

from datetime import datetime
from typing import AsyncGenerator

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import ConfigurationError, settings
from infrastructure.database.models import ProfileModel
from infrastructure.database.session import get_session_factory

router = APIRouter(tags=["health"])

VERSION = "1.0.0"


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    timestamp: str
    environment: str
    database: str | None = None
    config: dict[str, bool] | None = None


async def get_optional_session() -> AsyncGenerator[AsyncSession | None, None]:
    """Database session, or None when the database is not configured."""
    try:
        factory = get_session_factory()
    except ConfigurationError:
        yield None
        return
    async with factory() as session:
        yield session


@router.get("/health", response_model=HealthResponse, summary="Basic health check")
async def health_check() -> HealthResponse:
    """
    Basic health check for load balancers.

    Returns service status without checking dependencies. Fast and lightweight.
    """
    return HealthResponse(
        status="healthy",
        version=VERSION,
        timestamp=datetime.utcnow().isoformat(),
        environment=settings.app_env,
    )


@router.get(
    "/health/detailed",
    response_model=HealthResponse,
    summary="Detailed health check",
)
async def detailed_health_check(
    db: AsyncSession | None = Depends(get_optional_session),
) -> HealthResponse:
    """
    Detailed health check including profile store reachability and which
    required settings are present (values are never returned).
    """
    missing = settings.missing_required()
    config = {
        "database_url": "DATABASE_URL" not in missing,
        "clerk_secret_key": "CLERK_SECRET_KEY" not in missing,
        "clerk_webhook_signing_secret": "CLERK_WEBHOOK_SIGNING_SECRET" not in missing,
    }

    if db is None:
        db_status = "not configured"
    else:
        try:
            await db.execute(select(ProfileModel.id).limit(1))
            db_status = "healthy"
        except SQLAlchemyError as e:
            db_status = f"unhealthy: {str(e)}"

    overall_status = "healthy" if db_status == "healthy" and not missing else "degraded"

    return HealthResponse(
        status=overall_status,
        version=VERSION,
        timestamp=datetime.utcnow().isoformat(),
        environment=settings.app_env,
        database=db_status,
        config=config,
    )
