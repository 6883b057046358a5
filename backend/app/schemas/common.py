"""
VideoTube Backend - Shared Response Schemas
=============================================

What:  The uniform JSON envelope, the pagination payload, user projections
       and the error format shared by every endpoint.

Envelope:
    Every successful response is
        {"status_code": 200, "data": ..., "message": "...", "success": true}
    and every error response is
        {"status_code": 404, "data": null, "message": "...", "success": false,
         "error": "not_found", "errors": [...], "request_id": "a1b2c3d4"}

    Why an envelope: clients read `success` and `message` the same way for
    every resource instead of branching on each endpoint's shape.
"""

import math
import uuid
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope wrapping any payload."""

    status_code: int = Field(default=200, description="HTTP status code, repeated in the body")
    data: T = Field(description="Response payload")
    message: str = Field(default="Success", description="Human-readable outcome")
    success: bool = Field(default=True, description="Always true for 2xx responses")

    @classmethod
    def ok(cls, data: Any, message: str = "Success", status_code: int = 200) -> "ApiResponse":
        return cls(
            status_code=status_code,
            data=data,
            message=message,
            success=status_code < 400,
        )


class Page(BaseModel, Generic[T]):
    """
    One page of an offset-paginated listing.

    Field meanings:
        docs            items on this page
        total_docs      items matching the filters across all pages
        paging_counter  1-based position of the first item on this page
        prev_page       None on the first page
        next_page       None on the last page
    """

    docs: List[T]
    total_docs: int
    limit: int
    page: int
    total_pages: int
    paging_counter: int
    has_prev_page: bool
    has_next_page: bool
    prev_page: Optional[int] = None
    next_page: Optional[int] = None

    @classmethod
    def build(cls, docs: List[Any], total_docs: int, page: int, limit: int) -> "Page":
        total_pages = math.ceil(total_docs / limit) if total_docs else 1
        has_prev = page > 1
        has_next = page < total_pages
        return cls(
            docs=docs,
            total_docs=total_docs,
            limit=limit,
            page=page,
            total_pages=total_pages,
            paging_counter=(page - 1) * limit + 1,
            has_prev_page=has_prev,
            has_next_page=has_next,
            prev_page=page - 1 if has_prev else None,
            next_page=page + 1 if has_next else None,
        )


# ══════════════════════════════════════════════════════════════════════════
# User Projections
# ══════════════════════════════════════════════════════════════════════════


class UserSummary(BaseModel):
    """Public profile fields shown next to comments, tweets, likes and subscriptions."""

    id: uuid.UUID
    username: str
    full_name: str
    avatar: str

    model_config = {"from_attributes": True}


class OwnerSummary(BaseModel):
    """Owner fields shown on the video detail page."""

    id: uuid.UUID
    username: str
    avatar: str
    email: str

    model_config = {"from_attributes": True}


# ══════════════════════════════════════════════════════════════════════════
# Errors and Health
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Error envelope returned by the global exception handlers.

    `errors` holds field-level problems (request validation) or the error
    context for client errors; it is empty for server errors.
    """

    status_code: int = Field(description="HTTP status code")
    data: None = Field(default=None)
    message: str = Field(description="Human-readable error description")
    success: bool = Field(default=False)
    error: str = Field(description="Machine-readable error code")
    errors: List[Dict[str, Any]] = Field(default_factory=list)
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthData(BaseModel):
    status: str = Field(description="OK when the process is serving requests")
    uptime: float = Field(description="Seconds since the service started")
    version: str
    database: str = Field(description="connected or disconnected")
