"""
VideoTube Backend - Playlist Service
======================================

What:  Playlist CRUD and membership changes.
How:   Membership goes through the ORM collection Playlist.videos, which is
       always loaded with selectinload before it is read or changed (async
       sessions cannot lazy-load). The composite primary key on
       playlist_videos keeps the collection duplicate-free; the service checks
       membership first so adding a present video is a silent no-op.
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.exceptions import DatabaseError, NotFoundError, ValidationError, VideoTubeError
from app.models.playlist import Playlist
from app.models.user import User
from app.models.video import Video
from app.schemas.playlist import PlaylistDetailResponse, PlaylistResponse
from app.services.common import ensure_owner, get_or_404, parse_id

logger = logging.getLogger(__name__)


def _require_name_and_description(name: Optional[str], description: Optional[str]):
    if not (name and name.strip()) or not (description and description.strip()):
        raise ValidationError(message="Name and description are required")
    return name.strip(), description.strip()


def _parse_membership_ids(video_id: str, playlist_id: str):
    try:
        return uuid.UUID(str(video_id)), uuid.UUID(str(playlist_id))
    except ValueError:
        raise ValidationError(
            message="Invalid Playlist or Video ID",
            context={"video_id": video_id, "playlist_id": playlist_id},
        )


class PlaylistService:
    """
    Business logic for playlists.

    Every mutation loads the playlist, runs the owner check and flushes;
    the request's session dependency commits.
    """

    async def _load(self, db: AsyncSession, playlist_id: uuid.UUID) -> Playlist:
        result = await db.execute(
            select(Playlist)
            .options(selectinload(Playlist.videos))
            .where(Playlist.id == playlist_id)
        )
        playlist = result.scalar_one_or_none()
        if playlist is None:
            raise NotFoundError(resource="Playlist", resource_id=str(playlist_id))
        return playlist

    async def create_playlist(
        self, db: AsyncSession, caller: User, name: str, description: str
    ) -> PlaylistResponse:
        name, description = _require_name_and_description(name, description)
        try:
            playlist = Playlist(
                name=name, description=description, owner_id=caller.id, videos=[]
            )
            db.add(playlist)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error creating playlist: %s", str(e))
            raise DatabaseError(message="Failed to create playlist")

        logger.info("Playlist %s created by %s", playlist.id, caller.id)
        return PlaylistResponse.model_validate(playlist)

    async def list_user_playlists(self, db: AsyncSession, user_id: str) -> List[PlaylistResponse]:
        uid = parse_id(user_id, "User")
        stmt = (
            select(Playlist)
            .options(selectinload(Playlist.videos))
            .where(Playlist.owner_id == uid)
            .order_by(Playlist.created_at.desc())
        )
        try:
            playlists = (await db.execute(stmt)).scalars().all()
        except SQLAlchemyError as e:
            logger.error("Database error listing playlists of %s: %s", uid, str(e))
            raise DatabaseError(message="Could not retrieve playlists. Please try again.")

        return [PlaylistResponse.model_validate(p) for p in playlists]

    async def get_playlist(self, db: AsyncSession, playlist_id: str) -> PlaylistDetailResponse:
        """The playlist with its videos populated, in the order they were added."""
        pid = parse_id(playlist_id, "Playlist")
        try:
            playlist = await self._load(db, pid)
        except SQLAlchemyError as e:
            logger.error("Database error fetching playlist %s: %s", pid, str(e))
            raise DatabaseError(context={"playlist_id": str(pid)})
        return PlaylistDetailResponse.model_validate(playlist)

    async def add_video(
        self, db: AsyncSession, caller: User, video_id: str, playlist_id: str
    ) -> PlaylistResponse:
        """
        Add a video to the caller's playlist (set semantics).

        Raises:
            ValidationError: "Invalid Playlist or Video ID"
            NotFoundError: playlist or video missing
            ForbiddenError: caller does not own the playlist
        """
        vid, pid = _parse_membership_ids(video_id, playlist_id)
        try:
            playlist = await self._load(db, pid)
            ensure_owner(playlist.owner_id, caller.id, "Only owners can add videos to this playlist")
            video = await get_or_404(db, Video, vid, "Video")

            if not any(v.id == vid for v in playlist.videos):
                playlist.videos.append(video)
                await db.flush()
                logger.info("Video %s added to playlist %s", vid, pid)
        except VideoTubeError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error adding %s to playlist %s: %s", vid, pid, str(e))
            raise DatabaseError(context={"playlist_id": str(pid), "video_id": str(vid)})

        return PlaylistResponse.model_validate(playlist)

    async def remove_video(
        self, db: AsyncSession, caller: User, video_id: str, playlist_id: str
    ) -> PlaylistResponse:
        """Remove a video from the caller's playlist; absent videos are ignored."""
        vid, pid = _parse_membership_ids(video_id, playlist_id)
        try:
            playlist = await self._load(db, pid)
            ensure_owner(
                playlist.owner_id, caller.id, "Only owners can remove videos from this playlist"
            )
            remaining = [v for v in playlist.videos if v.id != vid]
            if len(remaining) != len(playlist.videos):
                playlist.videos = remaining
                await db.flush()
                logger.info("Video %s removed from playlist %s", vid, pid)
        except VideoTubeError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error removing %s from playlist %s: %s", vid, pid, str(e))
            raise DatabaseError(context={"playlist_id": str(pid), "video_id": str(vid)})

        return PlaylistResponse.model_validate(playlist)

    async def delete_playlist(self, db: AsyncSession, caller: User, playlist_id: str) -> None:
        pid = parse_id(playlist_id, "Playlist")
        try:
            # collection loaded so the ORM can clear playlist_videos rows
            playlist = await self._load(db, pid)
            ensure_owner(playlist.owner_id, caller.id, "Unauthorized to delete this playlist")
            await db.delete(playlist)
            await db.flush()
        except VideoTubeError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error deleting playlist %s: %s", pid, str(e))
            raise DatabaseError(context={"playlist_id": str(pid)})

        logger.info("Playlist %s deleted", pid)

    async def update_playlist(
        self,
        db: AsyncSession,
        caller: User,
        playlist_id: str,
        name: str,
        description: str,
    ) -> PlaylistResponse:
        pid = parse_id(playlist_id, "Playlist")
        name, description = _require_name_and_description(name, description)
        try:
            playlist = await self._load(db, pid)
            ensure_owner(playlist.owner_id, caller.id, "Unauthorized to update this playlist")
            playlist.name = name
            playlist.description = description
            await db.flush()
        except VideoTubeError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error updating playlist %s: %s", pid, str(e))
            raise DatabaseError(context={"playlist_id": str(pid)})

        return PlaylistResponse.model_validate(playlist)


playlist_service = PlaylistService()
