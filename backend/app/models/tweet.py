"""
VideoTube Backend - Tweet Model
=================================

Short text posts on a user's channel.
"""

import uuid

from sqlalchemy import ForeignKey, Index, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.models.mixins import IdMixin, TimestampMixin
from app.models.user import User


class Tweet(IdMixin, TimestampMixin, Base):
    __tablename__ = "tweets"

    content: Mapped[str] = mapped_column(Text, nullable=False)
    owner_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    owner: Mapped[User] = relationship(User)

    __table_args__ = (
        Index("ix_tweets_owner_created", "owner_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Tweet(id={self.id}, owner_id={self.owner_id})>"
