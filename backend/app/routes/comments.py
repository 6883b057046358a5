"""VideoTube Backend - Comment Route Handlers (/api/v1/comments)."""

from typing import Any, Dict

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import get_current_user
from app.config import settings
from app.database import get_db_session
from app.models.user import User
from app.schemas.comment import CommentCreate, CommentResponse, CommentUpdate, CommentWithOwner
from app.schemas.common import ApiResponse, ErrorResponse, Page
from app.services.comment_service import comment_service

router = APIRouter(
    prefix="/api/v1/comments",
    tags=["Comments"],
    dependencies=[Depends(get_current_user)],
    responses={
        400: {"description": "Invalid input", "model": ErrorResponse},
        401: {"description": "Missing or invalid access token", "model": ErrorResponse},
        404: {"description": "Video or comment not found", "model": ErrorResponse},
    },
)


@router.get(
    "/{video_id}",
    response_model=ApiResponse[Page[CommentWithOwner]],
    summary="Comments on a video, newest first",
)
async def get_video_comments(
    video_id: str,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.default_page_size, ge=1, le=settings.max_page_size),
    db: AsyncSession = Depends(get_db_session),
):
    comments = await comment_service.list_comments(db, video_id, page=page, limit=limit)
    return ApiResponse.ok(comments, "Comments fetched successfully")


@router.post(
    "/{video_id}",
    status_code=201,
    response_model=ApiResponse[CommentResponse],
    summary="Comment on a video",
)
async def add_comment(
    video_id: str,
    body: CommentCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
):
    comment = await comment_service.add_comment(db, user, video_id, body.content)
    return ApiResponse.ok(comment, "Comment added successfully", status_code=201)


@router.patch(
    "/c/{comment_id}",
    response_model=ApiResponse[CommentResponse],
    responses={403: {"description": "Not the author", "model": ErrorResponse}},
    summary="Edit your comment",
)
async def update_comment(
    comment_id: str,
    body: CommentUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
):
    comment = await comment_service.update_comment(db, user, comment_id, body.content)
    return ApiResponse.ok(comment, "Comment updated successfully")


@router.delete(
    "/c/{comment_id}",
    response_model=ApiResponse[Dict[str, Any]],
    responses={403: {"description": "Not the author", "model": ErrorResponse}},
    summary="Delete your comment",
)
async def delete_comment(
    comment_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
):
    await comment_service.delete_comment(db, user, comment_id)
    return ApiResponse.ok({}, "Comment deleted successfully")
