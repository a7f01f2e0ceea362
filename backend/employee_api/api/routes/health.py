"""Health & Readiness Probes — liveness and readiness endpoints for container orchestration.

Invariants:
    - GET /health/ always returns 200 if process is up (liveness)
    - GET /health/ready returns 503 until the upstream client exists (readiness)

Design Decisions:
    - Readiness does not call the upstream: a rate-limited upstream must not
      pull every facade instance out of the load balancer
"""

import logging
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

import employee_api.infrastructure.upstream_client as upstream_module

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "employee-api",
        "version": "1.0.0",
    }


@router.get("/ready")
async def readiness_check():
    """Readiness probe — upstream client initialized."""
    if upstream_module.upstream_client is None:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "upstream_client_uninitialized",
            },
        )
    return {"status": "ready", "checks": {"upstream_client": "initialized"}}
