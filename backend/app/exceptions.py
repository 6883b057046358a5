"""
VideoTube Backend - Custom Exception Hierarchy
================================================

What:  Application-specific exceptions for every error scenario a handler can hit.
Why:   Services raise domain errors; a single global handler turns them into
       the uniform error envelope with the right HTTP status code.
How:   Each class fixes its `status_code` and machine-readable `error_code`
       and carries a user-facing message plus an optional context dict.
Who:   Raised by services, auth and middleware; caught in main.py.

Exception Hierarchy:
    VideoTubeError (base)            → 500
    ├── ValidationError              → 400 Bad Request (malformed id, missing field)
    ├── UnauthorizedError            → 401 Unauthorized (missing/invalid token)
    ├── ForbiddenError               → 403 Forbidden (owner check failed)
    ├── NotFoundError                → 404 Not Found
    ├── RateLimitExceededError       → 429 Too Many Requests
    ├── MediaStorageError            → 500 (local staging failed)
    ├── DatabaseError                → 500 (query failed; details logged only)
    └── MediaHostError               → 503 (bucket upload failed after retries)
"""

from typing import Any, Dict, Optional


class VideoTubeError(Exception):
    """
    Base exception for all VideoTube application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, returned only for client errors)
    """

    status_code: int = 500
    error_code: str = "server_error"
    # Server-side failures hide the message and context from the client
    expose_details: bool = False

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(VideoTubeError):
    """
    Raised when client input fails a business rule.

    Examples: an identifier that is not a UUID ("Invalid Video ID"), a blank
    comment, an update request with no fields.
    """

    status_code = 400
    error_code = "validation_error"
    expose_details = True

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class UnauthorizedError(VideoTubeError):
    """Raised when the request carries no valid access token."""

    status_code = 401
    error_code = "unauthorized"
    expose_details = True

    def __init__(
        self,
        message: str = "Unauthorized request",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ForbiddenError(VideoTubeError):
    """
    Raised when the owner check fails.

    The caller is authenticated but is not the owner of the resource they
    are trying to change.
    """

    status_code = 403
    error_code = "forbidden"
    expose_details = True

    def __init__(
        self,
        message: str = "You are not allowed to modify this resource",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(VideoTubeError):
    """
    Raised when a requested resource does not exist.

    SQLAlchemy returns None for missing rows; services convert that None
    into this exception so routes never deal with it.
    """

    status_code = 404
    error_code = "not_found"
    expose_details = True

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource} not found"
        ctx = context or {}
        ctx["resource"] = resource.lower()
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class RateLimitExceededError(VideoTubeError):
    """Raised when a client exceeds the request rate limit."""

    status_code = 429
    error_code = "rate_limit_exceeded"
    expose_details = True

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Too many requests. Please wait {retry_after} seconds before retrying."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after


class MediaStorageError(VideoTubeError):
    """
    Raised when staging an upload on local disk fails.

    Disk full, permission denied, unreadable content. The message stays
    generic; the path and OS error go to the log.
    """

    status_code = 500
    error_code = "server_error"

    def __init__(
        self,
        message: str = "Failed to process the uploaded file. Please try again.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(VideoTubeError):
    """
    Raised when a database operation fails unexpectedly.

    The client always receives a generic message; the original error type
    is kept in context and logged server-side.
    """

    status_code = 500
    error_code = "server_error"

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class MediaHostError(VideoTubeError):
    """
    Raised when the media host rejects an upload after all retries.

    503 tells the client the failure is upstream and retrying later is
    reasonable.
    """

    status_code = 503
    error_code = "media_host_unavailable"
    expose_details = True

    def __init__(
        self,
        message: str = "Media upload failed. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
