"""
VideoTube Backend - FastAPI Application Factory
=================================================

What:  Builds the FastAPI application: middleware, exception handlers, routers.
Who:   uvicorn (`uvicorn app.main:app`) and the test suite (`create_app()`).

Application Architecture:
    ┌─────────────────────────────────────────────────────────────┐
    │                        FastAPI App                          │
    │                                                             │
    │  Middleware:  Request ID → Rate Limit → Logging → CORS/GZip │
    │                                                             │
    │  Routers (/api/v1):                                         │
    │    healthcheck  videos  comments  likes                     │
    │    tweets       subscriptions     playlist                  │
    │                                                             │
    │  Exception handlers → uniform error envelope                │
    │    VideoTubeError (status from the class)                   │
    │    RequestValidationError → 400                             │
    │    HTTPException → its own status                           │
    │    anything else → 500, stack trace logged only             │
    └─────────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging, configuration check, staging directory
    Shutdown: dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncGenerator, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app import __version__
from app.config import settings
from app.database import dispose_engine
from app.exceptions import RateLimitExceededError, VideoTubeError
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.rate_limit import RateLimitMiddleware
from app.middleware.request_id import RequestIDMiddleware, request_id_var
from app.routes import comments, healthcheck, likes, playlists, subscriptions, tweets, videos
from app.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)

HTTP_ERROR_CODES = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    413: "payload_too_large",
}


# ══════════════════════════════════════════════════════════════════════════
# Logging
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure the root logger once: stdout handler, level from LOG_LEVEL.

    Format: 2024-01-15T12:00:00 [INFO] app.services.video_service: message
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Per-request chatter from libraries we already cover with our own logs
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("boto3").setLevel(logging.WARNING)
    logging.getLogger("s3transfer").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("=" * 60)
    logger.info("VideoTube Backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving: the health check and read endpoints still work
        logger.error("Configuration error: %s", str(e))

    storage = Path(settings.storage_root) / "staging"
    storage.mkdir(parents=True, exist_ok=True)
    logger.info("Upload staging directory: %s", storage.resolve())

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("VideoTube Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_response(
    status_code: int,
    message: str,
    error: str,
    errors: Optional[List[Dict[str, Any]]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    body = ErrorResponse(
        status_code=status_code,
        message=message,
        error=error,
        errors=errors or [],
        request_id=request_id_var.get("") or None,
    )
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(body),
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map every error to the envelope
    {status_code, data: null, message, success: false, error, errors, request_id}.

    Server-side failures (expose_details=False) return only their generic
    message; the context stays in the log next to the request ID.
    """

    @app.exception_handler(VideoTubeError)
    async def handle_videotube_error(request: Request, exc: VideoTubeError):
        rid = request_id_var.get("")
        headers = None
        if isinstance(exc, RateLimitExceededError):
            headers = {"Retry-After": str(exc.retry_after)}

        if exc.expose_details:
            if exc.status_code >= 500:
                logger.error("[%s] %s: %s", rid, type(exc).__name__, exc.message)
            else:
                logger.warning("[%s] %s: %s", rid, type(exc).__name__, exc.message)
            errors = [exc.context] if exc.context else []
            return error_response(exc.status_code, exc.message, exc.error_code, errors, headers)

        logger.error(
            "[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context
        )
        return error_response(exc.status_code, exc.message, exc.error_code, headers=headers)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        """Malformed body, query or form field; reported as 400 like service validation."""
        errors = [
            {
                "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
                "message": err.get("msg", ""),
                "type": err.get("type", ""),
            }
            for err in exc.errors()
        ]
        logger.warning("[%s] Request validation failed: %s", request_id_var.get(""), errors)
        return error_response(400, "Invalid request parameters", "validation_error", errors)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        code = HTTP_ERROR_CODES.get(exc.status_code, "http_error")
        return error_response(
            exc.status_code, str(exc.detail), code, headers=getattr(exc, "headers", None)
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s", request_id_var.get(""), str(exc), exc_info=True
        )
        return error_response(
            500,
            "An unexpected error occurred. Please try again or contact support.",
            "internal_server_error",
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    app = FastAPI(
        title="VideoTube API",
        description=(
            "Video-sharing backend: videos, comments, likes, tweets, "
            "channel subscriptions and playlists."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Added innermost first; execution order is the reverse:
    # RequestID → RateLimit → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Retry-After"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RateLimitMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(healthcheck.router)
    app.include_router(videos.router)
    app.include_router(comments.router)
    app.include_router(likes.router)
    app.include_router(tweets.router)
    app.include_router(subscriptions.router)
    app.include_router(playlists.router)

    return app


app = create_app()
