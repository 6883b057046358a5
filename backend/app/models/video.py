"""
VideoTube Backend - Video Model
=================================

What:  ORM model for the `videos` table.
How:   The binary files live on the media host; a row stores their public
       URLs plus the object keys needed to delete them later.

Lifecycle:
    1. Created published (is_published=True) after both uploads succeed
    2. Owner may edit title/description/thumbnail or flip is_published
    3. Deleting the row cascades to comments, likes and playlist entries
       (FK ON DELETE CASCADE); media objects are removed by the service

Query Patterns:
    - Public listing: WHERE is_published ORDER BY <sort field>
      → ix_videos_published_created covers the default sort
    - Channel listing: WHERE owner_id = :user AND is_published
"""

import uuid

from sqlalchemy import Boolean, Float, ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.models.mixins import IdMixin, TimestampMixin
from app.models.user import User


class Video(IdMixin, TimestampMixin, Base):
    __tablename__ = "videos"

    video_file: Mapped[str] = mapped_column(String(500), nullable=False)
    video_file_key: Mapped[str] = mapped_column(String(500), nullable=False)
    thumbnail: Mapped[str] = mapped_column(String(500), nullable=False)
    thumbnail_key: Mapped[str] = mapped_column(String(500), nullable=False)

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    # Seconds, reported by the uploader
    duration: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    views: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=text("0")
    )
    is_published: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=text("true")
    )

    owner_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    owner: Mapped[User] = relationship(User)

    __table_args__ = (
        Index("ix_videos_published_created", "is_published", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Video(id={self.id}, title='{self.title}', published={self.is_published})>"
