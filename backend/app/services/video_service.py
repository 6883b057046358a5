"""
VideoTube Backend - Video Service
===================================

What:  Listing, publishing, reading, editing, deleting and (un)publishing videos.
Who:   Called by the /api/v1/videos route handlers.

Publish flow (POST /api/v1/videos):
    ┌──────────┐    ┌─────────────┐    ┌──────────────┐    ┌──────────┐
    │  Upload  │───▶│  Validate   │───▶│  Media host  │───▶│  Store   │
    │  (Route) │    │  title/desc │    │  video+thumb │    │  (DB)    │
    └──────────┘    │  + files    │    │  (MediaServ) │    └──────────┘
                    └─────────────┘    └──────────────┘

    On failure after an upload succeeded the already-stored objects are
    deleted again so the bucket holds no orphans.

Listing (GET /api/v1/videos):
    match is_published → match title/description ILIKE → match owner →
    sort by a whitelisted column → paginate
"""

import logging
from typing import Any, List, NamedTuple, Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from app.exceptions import DatabaseError, NotFoundError, ValidationError, VideoTubeError
from app.models.user import User
from app.models.video import Video
from app.schemas.common import Page
from app.schemas.video import PublishStatusResponse, VideoDetailResponse, VideoResponse
from app.services.common import ensure_owner, get_or_404, paginate, parse_id
from app.services.media_service import IMAGE, VIDEO, MediaAsset, media_service

logger = logging.getLogger(__name__)

# Accepted sort_by values → column. camelCase aliases kept for older clients.
SORT_FIELDS = {
    "created_at": Video.created_at,
    "createdAt": Video.created_at,
    "updated_at": Video.updated_at,
    "updatedAt": Video.updated_at,
    "title": Video.title,
    "views": Video.views,
    "duration": Video.duration,
}

SORT_TYPES = ("asc", "desc")


class UploadedFile(NamedTuple):
    """
    One multipart file part, not yet read.

    `file` is anything with an async `read(size)` (the route passes the
    UploadFile itself); MediaService streams it to disk in chunks.
    """

    filename: str
    file: Any
    content_length: Optional[int] = None


class VideoService:
    """
    Business logic for videos.

    Error Handling Strategy:
        Application exceptions propagate unchanged. SQLAlchemy errors are
        logged and wrapped in DatabaseError so no SQL reaches the client.
    """

    async def list_videos(
        self,
        db: AsyncSession,
        page: int = 1,
        limit: int = 10,
        query: Optional[str] = None,
        sort_by: str = "created_at",
        sort_type: str = "desc",
        user_id: Optional[str] = None,
    ) -> Page:
        """
        Paginated listing of published videos.

        Args:
            query: Case-insensitive substring matched against title or description
            sort_by: One of SORT_FIELDS
            sort_type: "asc" or "desc"
            user_id: Restrict to one channel's videos

        Raises:
            ValidationError: unknown sort field/direction or malformed user_id
        """
        column = SORT_FIELDS.get(sort_by)
        if column is None:
            raise ValidationError(
                message=f"Invalid sort field '{sort_by}'",
                field="sort_by",
                context={"allowed": sorted(SORT_FIELDS)},
            )
        if sort_type not in SORT_TYPES:
            raise ValidationError(
                message="sort_type must be 'asc' or 'desc'", field="sort_type"
            )

        stmt = select(Video).where(Video.is_published.is_(True))

        if query:
            # autoescape: % and _ in the search text match literally
            stmt = stmt.where(
                or_(
                    Video.title.icontains(query, autoescape=True),
                    Video.description.icontains(query, autoescape=True),
                )
            )

        if user_id:
            stmt = stmt.where(Video.owner_id == parse_id(user_id, "User"))

        order = column.asc() if sort_type == "asc" else column.desc()
        # id as tiebreaker keeps pages stable when sort values repeat
        stmt = stmt.order_by(order, Video.id)

        try:
            return await paginate(db, stmt, VideoResponse, page, limit)
        except SQLAlchemyError as e:
            logger.error("Database error listing videos: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve videos. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def publish_video(
        self,
        db: AsyncSession,
        owner: User,
        title: Optional[str],
        description: Optional[str],
        video_file: Optional[UploadedFile],
        thumbnail: Optional[UploadedFile],
        duration: Optional[float] = None,
    ) -> VideoResponse:
        """
        Upload both files and create a published video owned by `owner`.

        Validation order matches what the client sees first: text fields,
        then the video file, then the thumbnail.

        Raises:
            ValidationError: missing title/description/file, or a bad file
            MediaHostError: the bucket rejected an upload (503)
            DatabaseError: the insert failed
        """
        if not (title and title.strip()) or not (description and description.strip()):
            raise ValidationError(message="Title and description are required")
        if video_file is None:
            raise ValidationError(message="Video file is missing", field="video_file")
        if thumbnail is None:
            raise ValidationError(message="Thumbnail is missing", field="thumbnail")
        if duration is not None and duration < 0:
            raise ValidationError(message="Duration cannot be negative", field="duration")

        # Oversized parts fail before anything reaches the bucket
        media_service.validate_declared_size(VIDEO, video_file.content_length)
        media_service.validate_declared_size(IMAGE, thumbnail.content_length)

        uploaded: List[MediaAsset] = []
        try:
            video_asset = await media_service.upload(
                VIDEO, video_file.filename, video_file.file, video_file.content_length
            )
            uploaded.append(video_asset)
            thumbnail_asset = await media_service.upload(
                IMAGE, thumbnail.filename, thumbnail.file, thumbnail.content_length
            )
            uploaded.append(thumbnail_asset)

            video = Video(
                video_file=video_asset.url,
                video_file_key=video_asset.key,
                thumbnail=thumbnail_asset.url,
                thumbnail_key=thumbnail_asset.key,
                title=title.strip(),
                description=description.strip(),
                duration=duration or 0.0,
                views=0,
                is_published=True,
                owner_id=owner.id,
            )
            db.add(video)
            await db.flush()
            logger.info("Video %s published by user %s", video.id, owner.id)
            return VideoResponse.model_validate(video)

        except Exception as e:
            for asset in uploaded:
                await media_service.delete(asset.key)
            if isinstance(e, VideoTubeError):
                raise
            logger.error("Unexpected error publishing video: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="An error occurred while publishing your video. Please try again.",
                context={"original_error": type(e).__name__},
            )

    async def get_video(self, db: AsyncSession, video_id: str) -> VideoDetailResponse:
        """
        One video joined with its owner {id, username, avatar, email}.

        Query plan:
            SELECT videos.*, users.* FROM videos
            LEFT OUTER JOIN users ON users.id = videos.owner_id
            WHERE videos.id = :uuid
        """
        vid = parse_id(video_id, "Video")
        try:
            result = await db.execute(
                select(Video).options(joinedload(Video.owner)).where(Video.id == vid)
            )
            video = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching video %s: %s", vid, str(e))
            raise DatabaseError(
                message="Could not retrieve the video. Please try again.",
                context={"video_id": str(vid)},
            )

        if video is None:
            raise NotFoundError(resource="Video", resource_id=str(vid))
        return VideoDetailResponse.model_validate(video)

    async def update_video(
        self,
        db: AsyncSession,
        caller: User,
        video_id: str,
        title: Optional[str] = None,
        description: Optional[str] = None,
        thumbnail: Optional[UploadedFile] = None,
    ) -> VideoResponse:
        """
        Partial update by the owner. A new thumbnail replaces the stored one;
        the old thumbnail object is deleted only after the row is updated.
        """
        vid = parse_id(video_id, "Video")
        title = title.strip() if title else None
        description = description.strip() if description else None
        if not title and not description and thumbnail is None:
            raise ValidationError(message="At least one field is required to update")

        try:
            video = await get_or_404(db, Video, vid, "Video")
        except SQLAlchemyError as e:
            logger.error("Database error loading video %s: %s", vid, str(e))
            raise DatabaseError(context={"video_id": str(vid)})

        ensure_owner(video.owner_id, caller.id, "Unauthorized request")

        new_thumbnail: Optional[MediaAsset] = None
        if thumbnail is not None:
            new_thumbnail = await media_service.upload(
                IMAGE, thumbnail.filename, thumbnail.file, thumbnail.content_length
            )

        old_thumbnail_key = video.thumbnail_key
        try:
            if title:
                video.title = title
            if description:
                video.description = description
            if new_thumbnail is not None:
                video.thumbnail = new_thumbnail.url
                video.thumbnail_key = new_thumbnail.key
            await db.flush()
        except SQLAlchemyError as e:
            if new_thumbnail is not None:
                await media_service.delete(new_thumbnail.key)
            logger.error("Database error updating video %s: %s", vid, str(e))
            raise DatabaseError(
                message="Could not update the video. Please try again.",
                context={"video_id": str(vid)},
            )

        if new_thumbnail is not None:
            await media_service.delete(old_thumbnail_key)

        logger.info("Video %s updated", vid)
        return VideoResponse.model_validate(video)

    async def delete_video(self, db: AsyncSession, caller: User, video_id: str) -> None:
        """Delete the row (comments, likes and memberships cascade) and both media objects."""
        vid = parse_id(video_id, "Video")
        try:
            video = await get_or_404(db, Video, vid, "Video")
            ensure_owner(video.owner_id, caller.id, "Unauthorized request")
            keys = (video.video_file_key, video.thumbnail_key)
            await db.delete(video)
            await db.flush()
        except VideoTubeError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error deleting video %s: %s", vid, str(e))
            raise DatabaseError(
                message="Could not delete the video. Please try again.",
                context={"video_id": str(vid)},
            )

        for key in keys:
            await media_service.delete(key)
        logger.info("Video %s deleted", vid)

    async def toggle_publish(
        self, db: AsyncSession, caller: User, video_id: str
    ) -> PublishStatusResponse:
        vid = parse_id(video_id, "Video")
        try:
            video = await get_or_404(db, Video, vid, "Video")
            ensure_owner(video.owner_id, caller.id, "Unauthorized to toggle status")
            video.is_published = not video.is_published
            await db.flush()
        except VideoTubeError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error toggling video %s: %s", vid, str(e))
            raise DatabaseError(context={"video_id": str(vid)})

        logger.info("Video %s is_published=%s", vid, video.is_published)
        return PublishStatusResponse(is_published=video.is_published)


# ── Singleton Instance ────────────────────────────────────────────────────
video_service = VideoService()
