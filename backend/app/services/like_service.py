"""
VideoTube Backend - Like Service
==================================

What:  Toggle a like on a video, comment or tweet, and list the videos a
       user has liked.
How:   One toggle routine parameterised by target. The like row is looked up
       by (liked_by, target); present → delete, absent → insert. The unique
       constraints on the table keep a user from liking a target twice even
       under concurrent requests.

Liked videos pipeline:
    match liked_by = caller AND video_id IS NOT NULL
    → lookup video → lookup video owner {id, username, full_name, avatar}
    → project {id, video_details} → sort newest like first
"""

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from app.exceptions import DatabaseError, VideoTubeError
from app.models.comment import Comment
from app.models.like import Like
from app.models.tweet import Tweet
from app.models.user import User
from app.models.video import Video
from app.schemas.like import LikedVideoResponse, LikeToggleResponse
from app.services.common import get_or_404, parse_id

logger = logging.getLogger(__name__)

# target name → (model, like column, resource label used in messages)
TARGETS = {
    "video": (Video, Like.video_id, "Video"),
    "comment": (Comment, Like.comment_id, "Comment"),
    "tweet": (Tweet, Like.tweet_id, "Tweet"),
}


class LikeService:
    async def toggle_like(
        self, db: AsyncSession, caller: User, target: str, target_id: str
    ) -> LikeToggleResponse:
        """
        Like or unlike one target.

        Raises:
            ValidationError: malformed target_id ("Invalid <Target> ID")
            NotFoundError: the target does not exist
        """
        model, column, resource = TARGETS[target]
        tid = parse_id(target_id, resource)

        try:
            await get_or_404(db, model, tid, resource)
            result = await db.execute(
                select(Like).where(column == tid, Like.liked_by_id == caller.id)
            )
            existing = result.scalar_one_or_none()

            if existing is not None:
                await db.delete(existing)
                await db.flush()
                logger.info("User %s unliked %s %s", caller.id, target, tid)
                return LikeToggleResponse(is_liked=False)

            db.add(Like(liked_by_id=caller.id, **{column.key: tid}))
            await db.flush()
        except VideoTubeError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error toggling like on %s %s: %s", target, tid, str(e))
            raise DatabaseError(context={"target": target, "target_id": str(tid)})

        logger.info("User %s liked %s %s", caller.id, target, tid)
        return LikeToggleResponse(is_liked=True)

    async def toggle_video_like(self, db: AsyncSession, caller: User, video_id: str) -> LikeToggleResponse:
        return await self.toggle_like(db, caller, "video", video_id)

    async def toggle_comment_like(self, db: AsyncSession, caller: User, comment_id: str) -> LikeToggleResponse:
        return await self.toggle_like(db, caller, "comment", comment_id)

    async def toggle_tweet_like(self, db: AsyncSession, caller: User, tweet_id: str) -> LikeToggleResponse:
        return await self.toggle_like(db, caller, "tweet", tweet_id)

    async def list_liked_videos(self, db: AsyncSession, caller: User) -> List[LikedVideoResponse]:
        stmt = (
            select(Like)
            .options(joinedload(Like.video).joinedload(Video.owner))
            .where(Like.liked_by_id == caller.id, Like.video_id.is_not(None))
            .order_by(Like.created_at.desc())
        )
        try:
            result = await db.execute(stmt)
            likes = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Database error listing liked videos for %s: %s", caller.id, str(e))
            raise DatabaseError(message="Could not retrieve liked videos. Please try again.")

        return [LikedVideoResponse.model_validate(like) for like in likes if like.video is not None]


like_service = LikeService()
