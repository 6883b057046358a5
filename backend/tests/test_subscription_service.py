"""
VideoTube Backend - Subscription Service Unit Tests
=====================================================
"""

from datetime import datetime, timezone
from types import SimpleNamespace
from uuid import uuid4

import pytest

from app.exceptions import NotFoundError, ValidationError
from app.models.subscription import Subscription
from app.services.subscription_service import SubscriptionService


def subscription_row(subscriber=None, channel=None):
    return SimpleNamespace(
        id=uuid4(),
        subscriber=subscriber,
        subscriber_id=getattr(subscriber, "id", None),
        channel=channel,
        channel_id=getattr(channel, "id", None),
        created_at=datetime.now(timezone.utc),
    )


class TestToggleSubscription:
    def setup_method(self):
        self.service = SubscriptionService()

    @pytest.mark.asyncio
    async def test_subscribe(self, mock_db_session, user, other_user):
        mock_db_session.get.return_value = other_user
        mock_db_session.execute.return_value.scalar_one_or_none.return_value = None

        result = await self.service.toggle_subscription(mock_db_session, user, str(other_user.id))

        assert result.subscribed is True
        row = mock_db_session.added[0]
        assert isinstance(row, Subscription)
        assert row.subscriber_id == user.id
        assert row.channel_id == other_user.id

    @pytest.mark.asyncio
    async def test_unsubscribe(self, mock_db_session, user, other_user):
        existing = subscription_row(subscriber=user, channel=other_user)
        mock_db_session.get.return_value = other_user
        mock_db_session.execute.return_value.scalar_one_or_none.return_value = existing

        result = await self.service.toggle_subscription(mock_db_session, user, str(other_user.id))

        assert result.subscribed is False
        mock_db_session.delete.assert_awaited_once_with(existing)

    @pytest.mark.asyncio
    async def test_own_channel_rejected(self, mock_db_session, user):
        with pytest.raises(ValidationError, match="cannot subscribe to your own channel"):
            await self.service.toggle_subscription(mock_db_session, user, str(user.id))
        mock_db_session.get.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_invalid_channel_id(self, mock_db_session, user):
        with pytest.raises(ValidationError, match="Invalid Channel ID"):
            await self.service.toggle_subscription(mock_db_session, user, "channel")

    @pytest.mark.asyncio
    async def test_unknown_channel(self, mock_db_session, user):
        with pytest.raises(NotFoundError, match="Channel not found"):
            await self.service.toggle_subscription(mock_db_session, user, str(uuid4()))


class TestListings:
    def setup_method(self):
        self.service = SubscriptionService()

    @pytest.mark.asyncio
    async def test_channel_subscribers(self, mock_db_session, user, other_user):
        rows = [subscription_row(subscriber=other_user, channel=user)]
        mock_db_session.execute.return_value.scalars.return_value.all.return_value = rows

        result = await self.service.list_channel_subscribers(mock_db_session, str(user.id))

        assert result[0].subscriber_details.username == "bob"
        assert set(result[0].model_dump()) == {"id", "subscriber_details", "created_at"}

    @pytest.mark.asyncio
    async def test_subscribed_channels(self, mock_db_session, user, other_user):
        rows = [subscription_row(subscriber=user, channel=other_user)]
        mock_db_session.execute.return_value.scalars.return_value.all.return_value = rows

        result = await self.service.list_subscribed_channels(mock_db_session, str(user.id))

        assert result[0].subscribed_channel.id == other_user.id
        assert set(result[0].model_dump()) == {"id", "subscribed_channel", "created_at"}

    @pytest.mark.asyncio
    async def test_invalid_ids_use_their_own_labels(self, mock_db_session):
        with pytest.raises(ValidationError, match="Invalid Channel ID"):
            await self.service.list_channel_subscribers(mock_db_session, "x")
        with pytest.raises(ValidationError, match="Invalid Subscriber ID"):
            await self.service.list_subscribed_channels(mock_db_session, "x")
