"""
ORM models. Importing the package registers every table on Base.metadata,
which both the mapper configuration and Alembic rely on.
"""

from app.models.user import User
from app.models.video import Video
from app.models.comment import Comment
from app.models.tweet import Tweet
from app.models.like import Like
from app.models.subscription import Subscription
from app.models.playlist import Playlist, playlist_videos

__all__ = [
    "User",
    "Video",
    "Comment",
    "Tweet",
    "Like",
    "Subscription",
    "Playlist",
    "playlist_videos",
]
