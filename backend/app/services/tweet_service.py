"""VideoTube Backend - Tweet Service (short text posts on a channel)."""

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from app.exceptions import DatabaseError, VideoTubeError
from app.models.tweet import Tweet
from app.models.user import User
from app.schemas.tweet import TweetResponse, TweetWithOwner
from app.services.common import ensure_owner, get_or_404, parse_id, require_text

logger = logging.getLogger(__name__)


class TweetService:
    async def create_tweet(self, db: AsyncSession, caller: User, content: str) -> TweetResponse:
        text = require_text(content, "Tweet content is required", "content")
        try:
            tweet = Tweet(content=text, owner_id=caller.id)
            db.add(tweet)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error creating tweet: %s", str(e))
            raise DatabaseError(message="Failed to create tweet, please try again")

        logger.info("Tweet %s created by %s", tweet.id, caller.id)
        return TweetResponse.model_validate(tweet)

    async def list_user_tweets(self, db: AsyncSession, user_id: str) -> List[TweetWithOwner]:
        """
        A user's tweets, newest first, each with owner_details.

        An unknown (but well-formed) user simply has no tweets.
        """
        uid = parse_id(user_id, "User")
        stmt = (
            select(Tweet)
            .options(joinedload(Tweet.owner))
            .where(Tweet.owner_id == uid)
            .order_by(Tweet.created_at.desc())
        )
        try:
            result = await db.execute(stmt)
            tweets = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Database error listing tweets for %s: %s", uid, str(e))
            raise DatabaseError(message="Could not retrieve tweets. Please try again.")

        return [TweetWithOwner.model_validate(tweet) for tweet in tweets]

    async def update_tweet(
        self, db: AsyncSession, caller: User, tweet_id: str, content: str
    ) -> TweetResponse:
        tid = parse_id(tweet_id, "Tweet")
        text = require_text(content, "Content is required to update tweet", "content")
        try:
            tweet = await get_or_404(db, Tweet, tid, "Tweet")
            ensure_owner(tweet.owner_id, caller.id, "You do not have permission to update this tweet")
            tweet.content = text
            await db.flush()
        except VideoTubeError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error updating tweet %s: %s", tid, str(e))
            raise DatabaseError(context={"tweet_id": str(tid)})

        return TweetResponse.model_validate(tweet)

    async def delete_tweet(self, db: AsyncSession, caller: User, tweet_id: str) -> None:
        tid = parse_id(tweet_id, "Tweet")
        try:
            tweet = await get_or_404(db, Tweet, tid, "Tweet")
            ensure_owner(tweet.owner_id, caller.id, "You do not have permission to delete this tweet")
            await db.delete(tweet)
            await db.flush()
        except VideoTubeError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error deleting tweet %s: %s", tid, str(e))
            raise DatabaseError(context={"tweet_id": str(tid)})

        logger.info("Tweet %s deleted", tid)


tweet_service = TweetService()
