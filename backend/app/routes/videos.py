"""
VideoTube Backend - Video Route Handlers
==========================================

What:  /api/v1/videos: listing, publishing, detail, edit, delete, publish toggle.
How:   Extracts query/form/file parameters, hands the unread uploads
       to VideoService, delegates to VideoService and wraps the result in the envelope.

Request Flow (publish):
    1. Client sends multipart/form-data: title, description, duration,
       video_file, thumbnail
    2. Declared part sizes are checked before any byte is read
    3. VideoService streams each file to staging in chunks, validates,
       uploads to the media host, inserts the row
    4. 201 Created with the stored video
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import get_current_user
from app.config import settings
from app.database import get_db_session
from app.models.user import User
from app.schemas.common import ApiResponse, ErrorResponse, Page
from app.schemas.video import PublishStatusResponse, VideoDetailResponse, VideoResponse
from app.services.video_service import UploadedFile, video_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/videos",
    tags=["Videos"],
    dependencies=[Depends(get_current_user)],
    responses={
        400: {"description": "Invalid input", "model": ErrorResponse},
        401: {"description": "Missing or invalid access token", "model": ErrorResponse},
    },
)


def as_upload(file: Optional[UploadFile]) -> Optional[UploadedFile]:
    """Wrap an optional multipart file; a part without a filename counts as missing."""
    if file is None or not file.filename:
        return None
    return UploadedFile(filename=file.filename, file=file, content_length=file.size)


async def close_uploads(*files: Optional[UploadFile]) -> None:
    for file in files:
        if file is not None:
            await file.close()


@router.get(
    "",
    response_model=ApiResponse[Page[VideoResponse]],
    summary="List published videos",
)
async def get_all_videos(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.default_page_size, ge=1, le=settings.max_page_size),
    query: Optional[str] = Query(default=None, description="Search title and description"),
    sort_by: str = Query(
        default="created_at",
        description="created_at, updated_at, title, views or duration",
    ),
    sort_type: str = Query(default="desc", description="asc or desc"),
    user_id: Optional[str] = Query(default=None, description="Only this channel's videos"),
    db: AsyncSession = Depends(get_db_session),
):
    videos = await video_service.list_videos(
        db,
        page=page,
        limit=limit,
        query=query,
        sort_by=sort_by,
        sort_type=sort_type,
        user_id=user_id,
    )
    return ApiResponse.ok(videos, "Videos fetched successfully")


@router.post(
    "",
    status_code=201,
    response_model=ApiResponse[VideoResponse],
    responses={
        503: {"description": "Media host unavailable", "model": ErrorResponse},
    },
    summary="Publish a video",
    description=(
        "Upload a video file and a thumbnail image together with a title and "
        "description. Video: mp4, mov, webm, mkv. Thumbnail: png, jpg, jpeg, webp."
    ),
)
async def publish_a_video(
    title: Optional[str] = Form(default=None),
    description: Optional[str] = Form(default=None),
    duration: Optional[float] = Form(default=None, description="Length in seconds"),
    video_file: Optional[UploadFile] = File(default=None),
    thumbnail: Optional[UploadFile] = File(default=None),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
):
    video_upload = as_upload(video_file)
    thumbnail_upload = as_upload(thumbnail)

    logger.info(
        "Publish request from %s: video=%s (%s bytes declared)",
        user.id,
        video_upload.filename if video_upload else None,
        video_upload.content_length if video_upload else None,
    )

    try:
        video = await video_service.publish_video(
            db,
            owner=user,
            title=title,
            description=description,
            video_file=video_upload,
            thumbnail=thumbnail_upload,
            duration=duration,
        )
    finally:
        await close_uploads(video_file, thumbnail)
    return ApiResponse.ok(video, "Video published successfully", status_code=201)


@router.get(
    "/{video_id}",
    response_model=ApiResponse[VideoDetailResponse],
    responses={404: {"description": "Video not found", "model": ErrorResponse}},
    summary="Video details with owner",
)
async def get_video_by_id(video_id: str, db: AsyncSession = Depends(get_db_session)):
    video = await video_service.get_video(db, video_id)
    return ApiResponse.ok(video, "Video details fetched")


@router.patch(
    "/{video_id}",
    response_model=ApiResponse[VideoResponse],
    responses={
        403: {"description": "Not the owner", "model": ErrorResponse},
        404: {"description": "Video not found", "model": ErrorResponse},
    },
    summary="Update title, description or thumbnail",
)
async def update_video(
    video_id: str,
    title: Optional[str] = Form(default=None),
    description: Optional[str] = Form(default=None),
    thumbnail: Optional[UploadFile] = File(default=None),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
):
    try:
        video = await video_service.update_video(
            db,
            caller=user,
            video_id=video_id,
            title=title,
            description=description,
            thumbnail=as_upload(thumbnail),
        )
    finally:
        await close_uploads(thumbnail)
    return ApiResponse.ok(video, "Video updated successfully")


@router.delete(
    "/{video_id}",
    response_model=ApiResponse[Dict[str, Any]],
    responses={
        403: {"description": "Not the owner", "model": ErrorResponse},
        404: {"description": "Video not found", "model": ErrorResponse},
    },
    summary="Delete a video and its media",
)
async def delete_video(
    video_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
):
    await video_service.delete_video(db, caller=user, video_id=video_id)
    return ApiResponse.ok({}, "Video deleted successfully")


@router.patch(
    "/toggle/publish/{video_id}",
    response_model=ApiResponse[PublishStatusResponse],
    responses={
        403: {"description": "Not the owner", "model": ErrorResponse},
        404: {"description": "Video not found", "model": ErrorResponse},
    },
    summary="Flip the published flag",
)
async def toggle_publish_status(
    video_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
):
    status = await video_service.toggle_publish(db, caller=user, video_id=video_id)
    return ApiResponse.ok(status, "Publish status toggled")
