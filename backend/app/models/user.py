"""
VideoTube Backend - User Model
================================

What:  ORM model for the `users` table.
Why:   Every other collection points at a user: videos, comments and tweets
       through `owner_id`, likes through `liked_by_id`, subscriptions through
       both `subscriber_id` and `channel_id` (a channel is just a user).
Who:   Rows are provisioned by the identity service; this backend reads them
       for owner lookups and the authenticated caller.

Credentials are not stored here. Password hashing and token issuance live
with the identity service.
"""

from typing import Optional

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.models.mixins import IdMixin, TimestampMixin


class User(IdMixin, TimestampMixin, Base):
    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(50), nullable=False, unique=True, index=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    full_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    # Media host URLs
    avatar: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    cover_image: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"
