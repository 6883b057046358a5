"""
VideoTube Backend - Subscription Model
========================================

A subscription links a subscriber (user) to a channel (also a user).
The pair is unique and a user cannot subscribe to themselves.
"""

import uuid

from sqlalchemy import CheckConstraint, ForeignKey, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.models.mixins import IdMixin, TimestampMixin
from app.models.user import User


class Subscription(IdMixin, TimestampMixin, Base):
    __tablename__ = "subscriptions"

    subscriber_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    channel_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    subscriber: Mapped[User] = relationship(User, foreign_keys=[subscriber_id])
    channel: Mapped[User] = relationship(User, foreign_keys=[channel_id])

    __table_args__ = (
        UniqueConstraint("subscriber_id", "channel_id", name="uq_subscriptions_pair"),
        CheckConstraint("subscriber_id <> channel_id", name="not_self"),
    )

    def __repr__(self) -> str:
        return f"<Subscription(subscriber={self.subscriber_id}, channel={self.channel_id})>"
