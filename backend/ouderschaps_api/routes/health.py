"""
Ouderschaps API: Health Check Route
=====================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Runs SELECT 1 against the database and reports the state of the
       outbound circuit breakers (identity provider, payment provider).
Who:   Docker health checks, load balancers and monitoring.

Status levels:
    - healthy:   database reachable, every breaker closed          (200)
    - degraded:  database reachable, a breaker open or half-open   (200)
    - unhealthy: database unreachable                              (503)
"""

import logging
import time

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text

from ouderschaps_api import __version__
from ouderschaps_api.database import engine
from ouderschaps_api.schemas.health import HealthResponse
from ouderschaps_api.services.resilience import CircuitBreaker, breaker_states

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse, "description": "Database unreachable"}},
    summary="Service health check",
)
async def health_check():
    db_status = "connected"
    overall = "healthy"

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", e)

    breakers = breaker_states()
    if overall == "healthy" and any(b["state"] != CircuitBreaker.CLOSED for b in breakers.values()):
        overall = "degraded"

    health = HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        circuit_breakers=breakers,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    if overall == "unhealthy":
        return JSONResponse(status_code=503, content=health.model_dump())
    return health
