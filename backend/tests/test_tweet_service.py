"""
VideoTube Backend - Tweet Service Unit Tests
==============================================
"""

from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError

from app.exceptions import DatabaseError, ForbiddenError, NotFoundError, ValidationError
from app.services.tweet_service import TweetService


class TestCreateTweet:
    def setup_method(self):
        self.service = TweetService()

    @pytest.mark.asyncio
    async def test_success(self, mock_db_session, user):
        result = await self.service.create_tweet(mock_db_session, user, "  hello world ")

        assert result.content == "hello world"
        assert result.owner_id == user.id
        assert result.id is not None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", ["", "   ", None])
    async def test_blank(self, mock_db_session, user, content):
        with pytest.raises(ValidationError, match="Tweet content is required"):
            await self.service.create_tweet(mock_db_session, user, content)

    @pytest.mark.asyncio
    async def test_insert_failure(self, mock_db_session, user):
        mock_db_session.flush.side_effect = OperationalError("INSERT", {}, Exception("down"))
        with pytest.raises(DatabaseError, match="Failed to create tweet, please try again"):
            await self.service.create_tweet(mock_db_session, user, "hi")


class TestListUserTweets:
    def setup_method(self):
        self.service = TweetService()

    @pytest.mark.asyncio
    async def test_owner_details(self, mock_db_session, make_tweet, user):
        tweets = [make_tweet(content="newer"), make_tweet(content="older")]
        mock_db_session.execute.return_value.scalars.return_value.all.return_value = tweets

        result = await self.service.list_user_tweets(mock_db_session, str(user.id))

        assert [t.content for t in result] == ["newer", "older"]
        assert result[0].owner_details.username == user.username
        assert "owner_details" in result[0].model_dump()

    @pytest.mark.asyncio
    async def test_unknown_user_has_no_tweets(self, mock_db_session):
        mock_db_session.execute.return_value.scalars.return_value.all.return_value = []
        assert await self.service.list_user_tweets(mock_db_session, str(uuid4())) == []

    @pytest.mark.asyncio
    async def test_invalid_user_id(self, mock_db_session):
        with pytest.raises(ValidationError, match="Invalid User ID"):
            await self.service.list_user_tweets(mock_db_session, "someone")

    @pytest.mark.asyncio
    async def test_filtered_by_owner_newest_first(self, mock_db_session, compile_sql, user):
        mock_db_session.execute.return_value.scalars.return_value.all.return_value = []

        await self.service.list_user_tweets(mock_db_session, str(user.id))

        sql, params = compile_sql(mock_db_session.execute.await_args.args[0])
        assert "tweets.owner_id = " in sql
        assert user.id in params.values()
        assert "ORDER BY tweets.created_at DESC" in sql


class TestUpdateTweet:
    def setup_method(self):
        self.service = TweetService()

    @pytest.mark.asyncio
    async def test_owner_edits(self, mock_db_session, make_tweet, user):
        tweet = make_tweet()
        mock_db_session.get.return_value = tweet

        result = await self.service.update_tweet(mock_db_session, user, str(tweet.id), "changed")

        assert result.content == "changed"

    @pytest.mark.asyncio
    async def test_id_checked_before_content(self, mock_db_session, user):
        with pytest.raises(ValidationError, match="Invalid Tweet ID"):
            await self.service.update_tweet(mock_db_session, user, "bad", "")

    @pytest.mark.asyncio
    async def test_blank_content(self, mock_db_session, user):
        with pytest.raises(ValidationError, match="Content is required to update tweet"):
            await self.service.update_tweet(mock_db_session, user, str(uuid4()), " ")

    @pytest.mark.asyncio
    async def test_other_user(self, mock_db_session, make_tweet, user, other_user):
        mock_db_session.get.return_value = make_tweet(owner=other_user)
        with pytest.raises(ForbiddenError, match="You do not have permission to update this tweet"):
            await self.service.update_tweet(mock_db_session, user, str(uuid4()), "x")

    @pytest.mark.asyncio
    async def test_missing(self, mock_db_session, user):
        with pytest.raises(NotFoundError, match="Tweet not found"):
            await self.service.update_tweet(mock_db_session, user, str(uuid4()), "x")


class TestDeleteTweet:
    def setup_method(self):
        self.service = TweetService()

    @pytest.mark.asyncio
    async def test_owner_deletes(self, mock_db_session, make_tweet, user):
        tweet = make_tweet()
        mock_db_session.get.return_value = tweet

        await self.service.delete_tweet(mock_db_session, user, str(tweet.id))

        mock_db_session.delete.assert_awaited_once_with(tweet)

    @pytest.mark.asyncio
    async def test_other_user(self, mock_db_session, make_tweet, user, other_user):
        mock_db_session.get.return_value = make_tweet(owner=other_user)
        with pytest.raises(ForbiddenError, match="You do not have permission to delete this tweet"):
            await self.service.delete_tweet(mock_db_session, user, str(uuid4()))
        mock_db_session.delete.assert_not_awaited()
