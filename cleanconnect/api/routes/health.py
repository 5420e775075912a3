"""Health check endpoints for readiness and liveness probes."""

from datetime import datetime, timezone

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from cleanconnect.services.database import get_db_manager

router = APIRouter(prefix="/api/health", tags=["health"])


async def database_status() -> str:
    db_manager = get_db_manager()
    if db_manager is None:
        return "not_initialized"
    return "healthy" if await db_manager.health_check() else "unhealthy"


@router.get(
    "",
    summary="General health check",
    status_code=status.HTTP_200_OK,
)
async def health() -> dict:
    """Service status with database connectivity.

    Returns:
        Health status dict
    """
    database = await database_status()
    return {
        "status": "ok" if database == "healthy" else "degraded",
        "database": database,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get(
    "/live",
    summary="Liveness probe",
    status_code=status.HTTP_200_OK,
)
async def liveness() -> dict:
    """Returns 200 while the process is running."""
    return {"status": "alive"}


@router.get(
    "/ready",
    summary="Readiness probe",
    status_code=status.HTTP_200_OK,
)
async def readiness() -> JSONResponse:
    """Readiness probe endpoint.

    Returns 200 if the service can handle requests, 503 if the database is
    unavailable.
    """
    checks = {"database": await database_status()}
    ready = all(check == "healthy" for check in checks.values())

    return JSONResponse(
        status_code=status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "ready" if ready else "not_ready",
            "checks": checks,
        },
    )
