"""Initial schema

Revision ID: 001
Revises: None
Create Date: 2024-01-15 00:00:00.000000+00:00

What:  Creates every VideoTube table: users, videos, comments, tweets, likes,
       subscriptions, playlists and playlist_videos.
How:   UUID primary keys, TIMESTAMP WITH TIME ZONE audit columns, ON DELETE
       CASCADE foreign keys so deleting a user or video removes what hangs
       off it. Constraint names follow the naming convention in app.database.

Rollback: downgrade() drops every table (destructive).
"""

from typing import List, Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _base_columns() -> List[sa.Column]:
    """id, created_at, updated_at shared by every entity table."""
    return [
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
    ]


def _user_fk(table: str, column: str) -> sa.ForeignKeyConstraint:
    return sa.ForeignKeyConstraint(
        [column], ["users.id"], name=f"fk_{table}_{column}_users", ondelete="CASCADE"
    )


def upgrade() -> None:
    op.create_table(
        "users",
        *_base_columns(),
        sa.Column("username", sa.String(50), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("full_name", sa.String(100), nullable=False),
        sa.Column("avatar", sa.String(500), nullable=False),
        sa.Column("cover_image", sa.String(500), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    op.create_table(
        "videos",
        *_base_columns(),
        sa.Column("video_file", sa.String(500), nullable=False),
        sa.Column("video_file_key", sa.String(500), nullable=False),
        sa.Column("thumbnail", sa.String(500), nullable=False),
        sa.Column("thumbnail_key", sa.String(500), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("duration", sa.Float(), nullable=False),
        sa.Column("views", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column(
            "is_published", sa.Boolean(), server_default=sa.text("true"), nullable=False
        ),
        sa.Column("owner_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_videos"),
        _user_fk("videos", "owner_id"),
    )
    op.create_index("ix_videos_owner_id", "videos", ["owner_id"])
    op.create_index("ix_videos_published_created", "videos", ["is_published", "created_at"])

    op.create_table(
        "comments",
        *_base_columns(),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("video_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("owner_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_comments"),
        sa.ForeignKeyConstraint(
            ["video_id"], ["videos.id"], name="fk_comments_video_id_videos", ondelete="CASCADE"
        ),
        _user_fk("comments", "owner_id"),
    )
    op.create_index("ix_comments_video_created", "comments", ["video_id", "created_at"])

    op.create_table(
        "tweets",
        *_base_columns(),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("owner_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_tweets"),
        _user_fk("tweets", "owner_id"),
    )
    op.create_index("ix_tweets_owner_created", "tweets", ["owner_id", "created_at"])

    op.create_table(
        "likes",
        *_base_columns(),
        sa.Column("video_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("comment_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("tweet_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("liked_by_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_likes"),
        sa.ForeignKeyConstraint(
            ["video_id"], ["videos.id"], name="fk_likes_video_id_videos", ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(
            ["comment_id"], ["comments.id"], name="fk_likes_comment_id_comments", ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(
            ["tweet_id"], ["tweets.id"], name="fk_likes_tweet_id_tweets", ondelete="CASCADE"
        ),
        _user_fk("likes", "liked_by_id"),
        sa.CheckConstraint(
            "(CASE WHEN video_id IS NULL THEN 0 ELSE 1 END)"
            " + (CASE WHEN comment_id IS NULL THEN 0 ELSE 1 END)"
            " + (CASE WHEN tweet_id IS NULL THEN 0 ELSE 1 END) = 1",
            name="ck_likes_single_target",
        ),
        sa.UniqueConstraint("liked_by_id", "video_id", name="uq_likes_user_video"),
        sa.UniqueConstraint("liked_by_id", "comment_id", name="uq_likes_user_comment"),
        sa.UniqueConstraint("liked_by_id", "tweet_id", name="uq_likes_user_tweet"),
    )
    op.create_index("ix_likes_liked_by_id", "likes", ["liked_by_id"])

    op.create_table(
        "subscriptions",
        *_base_columns(),
        sa.Column("subscriber_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("channel_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_subscriptions"),
        _user_fk("subscriptions", "subscriber_id"),
        _user_fk("subscriptions", "channel_id"),
        sa.UniqueConstraint("subscriber_id", "channel_id", name="uq_subscriptions_pair"),
        sa.CheckConstraint("subscriber_id <> channel_id", name="ck_subscriptions_not_self"),
    )
    op.create_index("ix_subscriptions_subscriber_id", "subscriptions", ["subscriber_id"])
    op.create_index("ix_subscriptions_channel_id", "subscriptions", ["channel_id"])

    op.create_table(
        "playlists",
        *_base_columns(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("owner_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_playlists"),
        _user_fk("playlists", "owner_id"),
    )
    op.create_index("ix_playlists_owner_id", "playlists", ["owner_id"])

    op.create_table(
        "playlist_videos",
        sa.Column("playlist_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("video_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column(
            "added_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        # Composite key: a video appears in a playlist at most once
        sa.PrimaryKeyConstraint("playlist_id", "video_id", name="pk_playlist_videos"),
        sa.ForeignKeyConstraint(
            ["playlist_id"],
            ["playlists.id"],
            name="fk_playlist_videos_playlist_id_playlists",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["video_id"],
            ["videos.id"],
            name="fk_playlist_videos_video_id_videos",
            ondelete="CASCADE",
        ),
    )


def downgrade() -> None:
    """Drop every table in reverse dependency order. Destroys all data."""
    op.drop_table("playlist_videos")
    op.drop_index("ix_playlists_owner_id", table_name="playlists")
    op.drop_table("playlists")
    op.drop_index("ix_subscriptions_channel_id", table_name="subscriptions")
    op.drop_index("ix_subscriptions_subscriber_id", table_name="subscriptions")
    op.drop_table("subscriptions")
    op.drop_index("ix_likes_liked_by_id", table_name="likes")
    op.drop_table("likes")
    op.drop_index("ix_tweets_owner_created", table_name="tweets")
    op.drop_table("tweets")
    op.drop_index("ix_comments_video_created", table_name="comments")
    op.drop_table("comments")
    op.drop_index("ix_videos_published_created", table_name="videos")
    op.drop_index("ix_videos_owner_id", table_name="videos")
    op.drop_table("videos")
    op.drop_index("ix_users_username", table_name="users")
    op.drop_table("users")
