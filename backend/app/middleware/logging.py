"""
VideoTube Backend - Request Logging Middleware
================================================

What:  One access log line per request: method, path, status, duration,
       request ID, client IP and (when authenticated) the caller's user ID.
How:   Level follows the status class so alerting can key on severity:
       5xx → ERROR, 4xx → WARNING, everything else → INFO.

Never logged: request bodies, uploaded file contents, Authorization headers
or cookies.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.middleware.request_id import request_id_var

logger = logging.getLogger("videotube.access")

# Polled every few seconds by balancers; logging them drowns real traffic
QUIET_PATHS = {"/api/v1/healthcheck"}


def client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        rid = request_id_var.get("") or getattr(request.state, "request_id", "")
        user_id = getattr(request.state, "user_id", None)
        ip = client_ip(request)

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s user=%s",
            request.method,
            path,
            status,
            duration_ms,
            rid,
            ip,
            user_id or "-",
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": ip,
                "user_id": user_id,
            },
        )
        return response
