"""Health & Readiness Probes — process and database checks for the orchestrator.

Invariants:
    - GET /health/ answers 200 whenever the process can serve a request
    - GET /health/ready answers 503 until the pool can run SELECT 1
"""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from directory_api import __version__
from directory_api.infrastructure import database

router = APIRouter(prefix="/health", tags=["health"])

SERVICE_NAME = "directory-api"


@router.get("/", status_code=status.HTTP_200_OK)
async def liveness():
    return {"status": "healthy", "service": SERVICE_NAME, "version": __version__}


@router.get("/ready")
async def readiness():
    """db_manager is read at call time: it is set by the lifespan, after import."""
    manager = database.db_manager
    if manager is None or not await manager.health_check():
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "database_unavailable"},
        )
    return {"status": "ready", "checks": {"database": "healthy"}}
