"""Health & Readiness Probes — liveness and readiness endpoints.

Invariants:
    - GET /api/v1/health/ always returns 200 if the process is serving
    - GET /api/v1/health/ready returns 503 if a configured database is unreachable;
      with no databases configured it is ready by definition
"""

import logging
from fastapi import APIRouter, Depends, Request

from harmonia.api.envelope import ApiResponse, get_api
from harmonia.api.dependencies import get_environment
from harmonia.config import Environment

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/")
async def health_check(
    api: ApiResponse = Depends(get_api),
    environment: Environment = Depends(get_environment),
):
    """Basic liveness probe."""
    return api.send(
        {"status": "healthy", "service": environment.app.name},
        api.codes.OK,
    )


@router.get("/ready")
async def readiness_check(
    request: Request,
    api: ApiResponse = Depends(get_api),
    environment: Environment = Depends(get_environment),
):
    """Readiness probe — includes database connectivity."""
    if not environment.databases:
        return api.send(
            {"status": "ready", "checks": {"database": "not_configured"}},
            api.codes.OK,
        )
    datastore = request.app.state.datastore
    if not await datastore.health_check():
        return api.send(
            {"status": "not_ready", "reason": "database_unavailable"},
            api.codes.SERVICE_UNAVAILABLE,
        )
    return api.send(
        {"status": "ready", "checks": {"database": "healthy"}}, api.codes.OK,
    )
