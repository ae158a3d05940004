"""
Postboard — Health Check Route
================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Runs SELECT 1 against the database the app was built with.
Who:   Called by container health checks, load balancers, monitoring.

Status levels:
    - healthy:   database reachable (HTTP 200)
    - unhealthy: database unreachable (HTTP 503, stop routing traffic)
"""

import logging
import time

from fastapi import APIRouter, Request, Response

from postboard import __version__
from postboard.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Initialized once when the module loads
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(request: Request, response: Response) -> HealthResponse:
    db_status = "connected"
    overall = "healthy"

    try:
        await request.app.state.database.ping()
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        response.status_code = 503
        logger.warning("Health check: database unreachable: %s", str(e))

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
