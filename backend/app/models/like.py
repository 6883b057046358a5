"""
VideoTube Backend - Like Model
================================

What:  One row per (user, liked thing). The liked thing is exactly one of a
       video, a comment or a tweet.

Invariants (enforced by the database, not just the service):
    - ck_likes_single_target: exactly one of video_id / comment_id / tweet_id
    - uq_likes_*: a user likes a given target at most once
      (NULLs are distinct in unique constraints, so the three constraints
      do not interfere with each other)
"""

import uuid
from typing import Optional

from sqlalchemy import CheckConstraint, ForeignKey, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.models.mixins import IdMixin, TimestampMixin
from app.models.video import Video


class Like(IdMixin, TimestampMixin, Base):
    __tablename__ = "likes"

    video_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True), ForeignKey("videos.id", ondelete="CASCADE"), nullable=True
    )
    comment_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True), ForeignKey("comments.id", ondelete="CASCADE"), nullable=True
    )
    tweet_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True), ForeignKey("tweets.id", ondelete="CASCADE"), nullable=True
    )
    liked_by_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    video: Mapped[Optional[Video]] = relationship(Video)

    __table_args__ = (
        CheckConstraint(
            "(CASE WHEN video_id IS NULL THEN 0 ELSE 1 END)"
            " + (CASE WHEN comment_id IS NULL THEN 0 ELSE 1 END)"
            " + (CASE WHEN tweet_id IS NULL THEN 0 ELSE 1 END) = 1",
            name="single_target",
        ),
        UniqueConstraint("liked_by_id", "video_id", name="uq_likes_user_video"),
        UniqueConstraint("liked_by_id", "comment_id", name="uq_likes_user_comment"),
        UniqueConstraint("liked_by_id", "tweet_id", name="uq_likes_user_tweet"),
    )

    def __repr__(self) -> str:
        target = self.video_id or self.comment_id or self.tweet_id
        return f"<Like(id={self.id}, liked_by={self.liked_by_id}, target={target})>"
