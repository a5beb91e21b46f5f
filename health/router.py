# ============================================================================
# HEALTH CHECK ROUTER
# ============================================================================
# EPOCH: 1 - REQUEST AGGREGATION
# STATUS: Infrastructure - FastAPI health check endpoints
# PURPOSE: Kubernetes probes
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Check Router

Endpoints:
    GET /livez   - Liveness probe (is the process alive?)
                   Always 200 while the process serves requests.

    GET /readyz  - Readiness probe (can we accept work?)
                   200 once the upstream transport client is started,
                   503 before startup or after shutdown.
"""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from infrastructure.http_client import get_transport_client
from __version__ import __version__, BUILD_DATE

logger = logging.getLogger(__name__)

health_router = APIRouter(tags=["Health"])


# ============================================================================
# LIVENESS PROBE
# ============================================================================

@health_router.get("/livez")
async def liveness_probe():
    """
    Kubernetes liveness probe.

    No external checks - just confirms the process is responsive.
    """
    return {"status": "alive", "version": __version__, "build_date": BUILD_DATE}


# ============================================================================
# READINESS PROBE
# ============================================================================

@health_router.get("/readyz")
async def readiness_probe():
    """
    Kubernetes readiness probe.

    Upstream services are not pinged: a slow upstream should fail its
    own tasks, not take this instance out of the load balancer.
    """
    client = get_transport_client()
    if client is None or not client.is_started:
        logger.warning("Readiness check failed: transport client not started")
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "checks": {"transport": "not started"}},
        )

    return {
        "status": "ready",
        "checks": {"transport": "started"},
        "timeout_seconds": client.settings.timeout_seconds,
    }
