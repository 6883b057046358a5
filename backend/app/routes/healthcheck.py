"""
VideoTube Backend - Health Check Route
========================================

What:  GET /api/v1/healthcheck for load balancers and uptime monitors.
How:   Always answers 200 while the process is serving; the `database`
       field reports whether a SELECT 1 probe succeeded so monitors can
       alert on it without the balancer pulling the instance.
Auth:  None. This is the only /api/v1 route that does not need a token.
"""

import logging
import time

from fastapi import APIRouter

from app import __version__
from app.database import check_database
from app.schemas.common import ApiResponse, HealthData

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["Health"])

# Module-level: set once when the app is imported
_start_time = time.time()


@router.get(
    "/healthcheck",
    response_model=ApiResponse[HealthData],
    summary="Service health check",
)
async def healthcheck():
    db_status = "connected"
    try:
        await check_database()
    except Exception as e:
        db_status = "disconnected"
        logger.warning("Health check: database unreachable: %s", str(e))

    data = HealthData(
        status="OK",
        uptime=round(time.time() - _start_time, 2),
        version=__version__,
        database=db_status,
    )
    return ApiResponse.ok(data, "Health check passed")
