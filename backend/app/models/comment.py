"""
VideoTube Backend - Comment Model
===================================

Comments belong to one video and one owner. The listing query always
filters by video and sorts newest first, hence the composite index.
"""

import uuid

from sqlalchemy import ForeignKey, Index, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.models.mixins import IdMixin, TimestampMixin
from app.models.user import User


class Comment(IdMixin, TimestampMixin, Base):
    __tablename__ = "comments"

    content: Mapped[str] = mapped_column(Text, nullable=False)
    video_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("videos.id", ondelete="CASCADE"),
        nullable=False,
    )
    owner_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    owner: Mapped[User] = relationship(User)

    __table_args__ = (
        Index("ix_comments_video_created", "video_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Comment(id={self.id}, video_id={self.video_id})>"
