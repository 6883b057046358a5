"""
VideoTube Backend - Comment Service
=====================================

What:  Paginated comment threads per video plus add/edit/delete by the author.

Listing pipeline:
    match video_id → lookup owner {id, username, full_name, avatar}
    → sort created_at DESC → paginate
    → served by ix_comments_video_created
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from app.exceptions import DatabaseError, VideoTubeError
from app.models.comment import Comment
from app.models.user import User
from app.models.video import Video
from app.schemas.comment import CommentResponse, CommentWithOwner
from app.schemas.common import Page
from app.services.common import ensure_owner, get_or_404, paginate, parse_id, require_text

logger = logging.getLogger(__name__)


class CommentService:
    async def list_comments(
        self, db: AsyncSession, video_id: str, page: int = 1, limit: int = 10
    ) -> Page:
        vid = parse_id(video_id, "Video")
        stmt = (
            select(Comment)
            .options(joinedload(Comment.owner))
            .where(Comment.video_id == vid)
            .order_by(Comment.created_at.desc(), Comment.id)
        )
        try:
            return await paginate(db, stmt, CommentWithOwner, page, limit)
        except SQLAlchemyError as e:
            logger.error("Database error listing comments for %s: %s", vid, str(e))
            raise DatabaseError(
                message="Could not retrieve comments. Please try again.",
                context={"video_id": str(vid)},
            )

    async def add_comment(
        self, db: AsyncSession, caller: User, video_id: str, content: str
    ) -> CommentResponse:
        """
        Raises:
            ValidationError: blank content or malformed video_id
            NotFoundError: the video does not exist
        """
        text = require_text(content, "Comment content is required", "content")
        vid = parse_id(video_id, "Video")
        try:
            await get_or_404(db, Video, vid, "Video")
            comment = Comment(content=text, video_id=vid, owner_id=caller.id)
            db.add(comment)
            await db.flush()
        except VideoTubeError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error adding comment to %s: %s", vid, str(e))
            raise DatabaseError(message="Error while adding comment")

        logger.info("Comment %s added to video %s", comment.id, vid)
        return CommentResponse.model_validate(comment)

    async def update_comment(
        self, db: AsyncSession, caller: User, comment_id: str, content: str
    ) -> CommentResponse:
        text = require_text(content, "Content is required to update", "content")
        cid = parse_id(comment_id, "Comment")
        try:
            comment = await get_or_404(db, Comment, cid, "Comment")
            ensure_owner(comment.owner_id, caller.id, "You are not authorized to edit this comment")
            comment.content = text
            await db.flush()
        except VideoTubeError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error updating comment %s: %s", cid, str(e))
            raise DatabaseError(context={"comment_id": str(cid)})

        return CommentResponse.model_validate(comment)

    async def delete_comment(self, db: AsyncSession, caller: User, comment_id: str) -> None:
        cid = parse_id(comment_id, "Comment")
        try:
            comment = await get_or_404(db, Comment, cid, "Comment")
            ensure_owner(comment.owner_id, caller.id, "You are not authorized to delete this comment")
            await db.delete(comment)
            await db.flush()
        except VideoTubeError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error deleting comment %s: %s", cid, str(e))
            raise DatabaseError(context={"comment_id": str(cid)})

        logger.info("Comment %s deleted", cid)


comment_service = CommentService()
