"""
TipMate Backend — Health Check Route
======================================

What:  Health check endpoint for monitoring and container probes.
How:   Connects through the application's DatabaseConnector (establishing
       the shared connection if this is the first caller) and runs SELECT 1.

Status levels:
    - healthy:   database reachable (HTTP 200)
    - unhealthy: database unreachable (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Depends, Response
from sqlalchemy import text

from tipmate import __version__
from tipmate.database import DatabaseConnector
from tipmate.routes.tip_calculations import get_connector
from tipmate.schemas.tip_calculation import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
)
async def health_check(
    response: Response,
    connector: DatabaseConnector = Depends(get_connector),
) -> HealthResponse:
    """Probe the database and report aggregate status."""
    db_status = "connected"
    overall = "healthy"

    try:
        engine = await connector.connect()
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
        connector_state=connector.state,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
