"""
VideoTube Backend - Playlist Route Handlers
=============================================

What:  /api/v1/playlist: create, list per user, detail, membership, edit, delete.

Route ordering note:
    /add/{video_id}/{playlist_id} and /remove/... have three segments while
    /{playlist_id} has one, so they never shadow each other.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import get_current_user
from app.database import get_db_session
from app.models.user import User
from app.schemas.common import ApiResponse, ErrorResponse
from app.schemas.playlist import (
    PlaylistCreate,
    PlaylistDetailResponse,
    PlaylistResponse,
    PlaylistUpdate,
)
from app.services.playlist_service import playlist_service

router = APIRouter(
    prefix="/api/v1/playlist",
    tags=["Playlists"],
    dependencies=[Depends(get_current_user)],
    responses={
        400: {"description": "Invalid input", "model": ErrorResponse},
        401: {"description": "Missing or invalid access token", "model": ErrorResponse},
    },
)

OWNER_RESPONSES = {
    403: {"description": "Not the playlist owner", "model": ErrorResponse},
    404: {"description": "Playlist or video not found", "model": ErrorResponse},
}


@router.post(
    "",
    status_code=201,
    response_model=ApiResponse[PlaylistResponse],
    summary="Create an empty playlist",
)
async def create_playlist(
    body: PlaylistCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
):
    playlist = await playlist_service.create_playlist(db, user, body.name, body.description)
    return ApiResponse.ok(playlist, "Playlist created successfully", status_code=201)


@router.get(
    "/user/{user_id}",
    response_model=ApiResponse[List[PlaylistResponse]],
    summary="A user's playlists",
)
async def get_user_playlists(user_id: str, db: AsyncSession = Depends(get_db_session)):
    playlists = await playlist_service.list_user_playlists(db, user_id)
    return ApiResponse.ok(playlists, "User playlists fetched successfully")


@router.get(
    "/{playlist_id}",
    response_model=ApiResponse[PlaylistDetailResponse],
    responses={404: {"description": "Playlist not found", "model": ErrorResponse}},
    summary="Playlist with its videos",
)
async def get_playlist_by_id(playlist_id: str, db: AsyncSession = Depends(get_db_session)):
    playlist = await playlist_service.get_playlist(db, playlist_id)
    return ApiResponse.ok(playlist, "Playlist fetched successfully")


@router.patch(
    "/add/{video_id}/{playlist_id}",
    response_model=ApiResponse[PlaylistResponse],
    responses=OWNER_RESPONSES,
    summary="Add a video to a playlist",
)
async def add_video_to_playlist(
    video_id: str,
    playlist_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
):
    playlist = await playlist_service.add_video(db, user, video_id, playlist_id)
    return ApiResponse.ok(playlist, "Video added to playlist")


@router.patch(
    "/remove/{video_id}/{playlist_id}",
    response_model=ApiResponse[PlaylistResponse],
    responses=OWNER_RESPONSES,
    summary="Remove a video from a playlist",
)
async def remove_video_from_playlist(
    video_id: str,
    playlist_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
):
    playlist = await playlist_service.remove_video(db, user, video_id, playlist_id)
    return ApiResponse.ok(playlist, "Video removed from playlist")


@router.delete(
    "/{playlist_id}",
    response_model=ApiResponse[Dict[str, Any]],
    responses=OWNER_RESPONSES,
    summary="Delete a playlist",
)
async def delete_playlist(
    playlist_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
):
    await playlist_service.delete_playlist(db, user, playlist_id)
    return ApiResponse.ok({}, "Playlist deleted successfully")


@router.patch(
    "/{playlist_id}",
    response_model=ApiResponse[PlaylistResponse],
    responses=OWNER_RESPONSES,
    summary="Rename a playlist",
)
async def update_playlist(
    playlist_id: str,
    body: PlaylistUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
):
    playlist = await playlist_service.update_playlist(
        db, user, playlist_id, body.name, body.description
    )
    return ApiResponse.ok(playlist, "Playlist updated successfully")
