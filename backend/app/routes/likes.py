"""VideoTube Backend - Like Route Handlers (/api/v1/likes)."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import get_current_user
from app.database import get_db_session
from app.models.user import User
from app.schemas.common import ApiResponse, ErrorResponse
from app.schemas.like import LikedVideoResponse, LikeToggleResponse
from app.services.like_service import like_service

router = APIRouter(
    prefix="/api/v1/likes",
    tags=["Likes"],
    responses={
        400: {"description": "Invalid ID", "model": ErrorResponse},
        401: {"description": "Missing or invalid access token", "model": ErrorResponse},
    },
)

TOGGLE_RESPONSES = {404: {"description": "Target not found", "model": ErrorResponse}}


@router.post(
    "/toggle/v/{video_id}",
    response_model=ApiResponse[LikeToggleResponse],
    responses=TOGGLE_RESPONSES,
    summary="Like or unlike a video",
)
async def toggle_video_like(
    video_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
):
    return ApiResponse.ok(await like_service.toggle_video_like(db, user, video_id))


@router.post(
    "/toggle/c/{comment_id}",
    response_model=ApiResponse[LikeToggleResponse],
    responses=TOGGLE_RESPONSES,
    summary="Like or unlike a comment",
)
async def toggle_comment_like(
    comment_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
):
    return ApiResponse.ok(await like_service.toggle_comment_like(db, user, comment_id))


@router.post(
    "/toggle/t/{tweet_id}",
    response_model=ApiResponse[LikeToggleResponse],
    responses=TOGGLE_RESPONSES,
    summary="Like or unlike a tweet",
)
async def toggle_tweet_like(
    tweet_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
):
    return ApiResponse.ok(await like_service.toggle_tweet_like(db, user, tweet_id))


@router.get(
    "/videos",
    response_model=ApiResponse[List[LikedVideoResponse]],
    summary="Videos the caller has liked",
)
async def get_liked_videos(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
):
    videos = await like_service.list_liked_videos(db, user)
    return ApiResponse.ok(videos, "Liked videos fetched successfully")
