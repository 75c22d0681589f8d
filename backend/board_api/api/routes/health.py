"""Health & Readiness Probes — liveness and readiness endpoints for container orchestration.

Invariants:
    - GET / and GET /health always return 200 if the process is up (liveness)
    - GET /health/ready returns 503 if the database is unreachable (readiness)
"""

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from board_api.infrastructure import database

logger = logging.getLogger(__name__)
router = APIRouter(tags=["health"])

SERVICE_NAME = "Backend API"


@router.get("/", status_code=status.HTTP_200_OK)
async def index():
    return {
        "message": f"{SERVICE_NAME} is running",
        "status": "ok",
        "swagger": "/swagger",
        "docs": "/docs",
        "api": "/api/test",
    }


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {"status": "healthy", "service": SERVICE_NAME}


@router.get("/health/ready")
async def readiness_check():
    """Readiness probe, includes database connectivity."""
    manager = database.db_manager
    db_ok = await manager.health_check() if manager else False
    if not db_ok:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "database_unavailable",
            },
        )
    return {"status": "ready", "checks": {"database": "healthy"}}
