"""
VideoTube Backend - Shared Service Helpers
============================================

What:  The handful of steps every resource service repeats:
       parse an identifier, require text, run the owner check, fetch-or-404,
       and paginate a query.

The pagination helper is the "paginate" stage of the match → lookup →
project → sort → paginate pattern used by the listing endpoints: the caller
builds the filtered, joined and sorted SELECT; paginate() counts it, slices
it and projects each row through a schema.
"""

import uuid
from typing import Any, List, Optional, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import ForbiddenError, NotFoundError, ValidationError
from app.schemas.common import Page


ModelT = TypeVar("ModelT")


def parse_id(value: Optional[str], resource: str) -> uuid.UUID:
    """
    Convert a path or query identifier to a UUID.

    Raises:
        ValidationError: "Invalid <resource> ID" for anything that is not a UUID.
    """
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        raise ValidationError(
            message=f"Invalid {resource} ID",
            field=f"{resource.lower()}_id",
            context={"value": value},
        )


def require_text(value: Optional[str], message: str, field: str) -> str:
    """Reject None, empty and whitespace-only strings; return the trimmed text."""
    if value is None or not value.strip():
        raise ValidationError(message=message, field=field)
    return value.strip()


def ensure_owner(owner_id: uuid.UUID, caller_id: uuid.UUID, message: str) -> None:
    """Owner check: only the stored owner may change a resource."""
    if str(owner_id) != str(caller_id):
        raise ForbiddenError(message=message)


async def get_or_404(
    db: AsyncSession, model: Type[ModelT], object_id: uuid.UUID, resource: str
) -> ModelT:
    instance = await db.get(model, object_id)
    if instance is None:
        raise NotFoundError(resource=resource, resource_id=str(object_id))
    return instance


async def paginate(
    db: AsyncSession,
    query: Select,
    schema: Type[BaseModel],
    page: int,
    limit: int,
) -> Page:
    """
    Run `query` for one page and wrap the projected rows in a Page.

    Two round trips: COUNT(*) over the unsorted query, then the sorted query
    with OFFSET/LIMIT. The count subquery drops ORDER BY and eager-load
    options, which do not change the number of rows.
    """
    count_query = select(func.count()).select_from(
        query.order_by(None).subquery()
    )
    total_docs = (await db.execute(count_query)).scalar_one()

    result = await db.execute(query.offset((page - 1) * limit).limit(limit))
    rows = result.scalars().all()

    docs: List[Any] = [schema.model_validate(row) for row in rows]
    return Page.build(docs=docs, total_docs=total_docs, page=page, limit=limit)
