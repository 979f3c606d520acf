"""
Mounjaro Tracker Backend — Health Check Route
===============================================

What:  Liveness/readiness probe for Docker and load balancers.
How:   SELECT 1 against the database; nothing else is critical.

Status levels:
    - healthy:   database reachable (HTTP 200)
    - unhealthy: database unreachable (HTTP 503, stop routing traffic)
"""

import logging
import time

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from tracker import __version__
from tracker.context import AppContext
from tracker.dependencies import get_context
from tracker.schemas.common import HealthResponse

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
async def health_check(context: AppContext = Depends(get_context)):
    database_ok = await context.database.ping()

    health = HealthResponse(
        status="healthy" if database_ok else "unhealthy",
        version=__version__,
        database="connected" if database_ok else "disconnected",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    if not database_ok:
        return JSONResponse(status_code=503, content=health.model_dump())
    return health
