"""
VideoTube Backend - Rate Limiting Middleware
==============================================

What:  Per-client sliding window limiter (RATE_LIMIT_REQUESTS per
       RATE_LIMIT_WINDOW seconds).
How:   Each client key keeps a deque of request timestamps. Timestamps older
       than the window are popped from the left; if the deque is still full
       the request is answered with a 429 error envelope and a Retry-After
       header.

Client key:
    The socket peer address, or the first X-Forwarded-For hop when
    TRUST_FORWARDED_FOR is enabled (only safe behind a proxy that
    overwrites the header).

Scope:
    State lives in process memory, so each worker enforces its own limit.
"""

import logging
import time
from collections import deque
from typing import Deque, Dict

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from app.config import settings
from app.exceptions import RateLimitExceededError
from app.middleware.request_id import request_id_var
from app.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)


class RateLimitMiddleware(BaseHTTPMiddleware):
    EXCLUDED_PATHS = {"/api/v1/healthcheck", "/docs", "/openapi.json", "/redoc"}

    # Sweep idle clients every this many requests
    CLEANUP_EVERY = 1000

    def __init__(self, app, **kwargs):
        super().__init__(app, **kwargs)
        self._requests: Dict[str, Deque[float]] = {}
        self._seen = 0

    def client_key(self, request: Request) -> str:
        if settings.trust_forwarded_for:
            forwarded = request.headers.get("X-Forwarded-For", "")
            first_hop = forwarded.split(",")[0].strip()
            if first_hop:
                return first_hop
        return request.client.host if request.client else "unknown"

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.EXCLUDED_PATHS:
            return await call_next(request)

        key = self.client_key(request)
        now = time.monotonic()
        window_start = now - settings.rate_limit_window

        timestamps = self._requests.setdefault(key, deque())
        while timestamps and timestamps[0] <= window_start:
            timestamps.popleft()

        if len(timestamps) >= settings.rate_limit_requests:
            retry_after = int(timestamps[0] + settings.rate_limit_window - now) + 1
            logger.warning(
                "Rate limit exceeded for %s: %d requests in %ds window",
                key,
                len(timestamps),
                settings.rate_limit_window,
            )
            return self._too_many_requests(retry_after)

        timestamps.append(now)

        self._seen += 1
        if self._seen % self.CLEANUP_EVERY == 0:
            self._cleanup_idle_clients(window_start)

        return await call_next(request)

    def _too_many_requests(self, retry_after: int) -> JSONResponse:
        exc = RateLimitExceededError(retry_after=retry_after)
        body = ErrorResponse(
            status_code=exc.status_code,
            message=exc.message,
            error=exc.error_code,
            errors=[exc.context],
            request_id=request_id_var.get("") or None,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=body.model_dump(mode="json"),
            headers={"Retry-After": str(retry_after)},
        )

    def _cleanup_idle_clients(self, window_start: float) -> None:
        idle = [
            key for key, timestamps in self._requests.items()
            if not timestamps or timestamps[-1] <= window_start
        ]
        for key in idle:
            del self._requests[key]
        if idle:
            logger.debug("Dropped %d idle rate-limit entries", len(idle))
