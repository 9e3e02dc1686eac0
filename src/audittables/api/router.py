"""Root API router: health probes plus the versioned module routers."""

from typing import Any

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from audittables import __version__
from audittables.api.dependencies import DBSession
from audittables.config import settings
from audittables.modules import discover_modules


class HealthResponse(BaseModel):
    """Liveness response schema."""

    status: str


class ReadinessResponse(BaseModel):
    """Readiness response schema."""

    status: str
    checks: dict[str, str]


health_router = APIRouter(tags=["health"])


@health_router.get("/health/live", response_model=HealthResponse, summary="Liveness probe")
async def liveness() -> HealthResponse:
    """Return 200 while the process is serving requests."""
    return HealthResponse(status="alive")


@health_router.get("/health/ready", response_model=ReadinessResponse, summary="Readiness probe")
async def readiness(db: DBSession) -> JSONResponse:
    """Return 200 once the database answers, 503 otherwise."""
    try:
        await db.execute(text("SELECT 1"))
        database = "ok"
    except SQLAlchemyError as exc:
        database = type(exc).__name__

    ready = database == "ok"
    return JSONResponse(
        status_code=status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "ready" if ready else "degraded", "checks": {"database": database}},
    )


@health_router.get("/info", summary="Application info")
async def info() -> dict[str, Any]:
    """Return application and storage metadata."""
    return {
        "app": settings.app_name,
        "version": __version__,
        "environment": settings.environment,
        "database": "sqlite" if settings.is_sqlite else "postgresql",
        "debug": settings.debug,
    }


v1_router = APIRouter(prefix="/api/v1")
for module_router in discover_modules():
    v1_router.include_router(module_router)

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(v1_router)
