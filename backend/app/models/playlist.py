"""
VideoTube Backend - Playlist Model
====================================

What:  Playlists and their ordered set of videos.
How:   Membership lives in `playlist_videos` with a composite primary key
       (playlist_id, video_id), which gives add-to-set semantics for free:
       a video appears in a playlist at most once. `added_at` keeps the
       insertion order used when the playlist is read back.
"""

import uuid
from typing import List

from sqlalchemy import Column, ForeignKey, String, Table, Text, text
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.models.mixins import IdMixin, TimestampMixin, utcnow
from app.models.video import Video


playlist_videos = Table(
    "playlist_videos",
    Base.metadata,
    Column(
        "playlist_id",
        UUID(as_uuid=True),
        ForeignKey("playlists.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "video_id",
        UUID(as_uuid=True),
        ForeignKey("videos.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "added_at",
        TIMESTAMP(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    ),
)


class Playlist(IdMixin, TimestampMixin, Base):
    __tablename__ = "playlists"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    owner_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    videos: Mapped[List[Video]] = relationship(
        Video,
        secondary=playlist_videos,
        order_by=playlist_videos.c.added_at,
    )

    def __repr__(self) -> str:
        return f"<Playlist(id={self.id}, name='{self.name}')>"
