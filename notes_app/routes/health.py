"""
Notes — Health Check Routes
=============================

What:  Liveness and readiness probes.
How:   GET / answers with a static message and touches nothing.
       GET /health runs SELECT 1 against the database.
Who:   Called by the client's `health` command, Docker health checks and
       load balancers.

Status levels (GET /health):
    - healthy:   database reachable (HTTP 200)
    - unhealthy: database unreachable (HTTP 503, stop routing traffic)
"""

import logging
import time

from fastapi import APIRouter, Response
from sqlalchemy import text

from notes_app import __version__
from notes_app.schemas.note import HealthResponse, MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Module-level so uptime counts from the first import
_start_time = time.time()


@router.get(
    "/",
    response_model=MessageResponse,
    summary="Liveness probe",
)
async def liveness() -> MessageResponse:
    return MessageResponse(message="Notes API Server is running")


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Readiness probe",
)
async def health_check(response: Response) -> HealthResponse:
    """
    Check that the database answers a trivial query.

    Returns:
        HealthResponse with database status and uptime. The HTTP status is
        503 when the database cannot be reached.
    """
    db_status = "connected"
    overall = "healthy"

    try:
        from notes_app.database import engine
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
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
