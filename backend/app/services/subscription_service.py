"""
VideoTube Backend - Subscription Service
==========================================

What:  Follow/unfollow a channel and list both sides of the relationship.

    channel subscribers:  match channel_id → lookup subscriber → project
                          {id, subscriber_details, created_at}
    subscribed channels:  match subscriber_id → lookup channel → project
                          {id, subscribed_channel, created_at}
"""

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from app.exceptions import DatabaseError, NotFoundError, ValidationError, VideoTubeError
from app.models.subscription import Subscription
from app.models.user import User
from app.schemas.subscription import (
    SubscribedChannelResponse,
    SubscriberResponse,
    SubscriptionToggleResponse,
)
from app.services.common import parse_id

logger = logging.getLogger(__name__)


class SubscriptionService:
    async def toggle_subscription(
        self, db: AsyncSession, caller: User, channel_id: str
    ) -> SubscriptionToggleResponse:
        """
        Subscribe the caller to a channel, or unsubscribe if already subscribed.

        Raises:
            ValidationError: malformed channel_id, or the caller's own channel
            NotFoundError: "Channel not found"
        """
        cid = parse_id(channel_id, "Channel")
        if str(cid) == str(caller.id):
            raise ValidationError(
                message="You cannot subscribe to your own channel", field="channel_id"
            )

        try:
            if await db.get(User, cid) is None:
                raise NotFoundError(resource="Channel", resource_id=str(cid))

            result = await db.execute(
                select(Subscription).where(
                    Subscription.subscriber_id == caller.id,
                    Subscription.channel_id == cid,
                )
            )
            existing = result.scalar_one_or_none()

            if existing is not None:
                await db.delete(existing)
                await db.flush()
                logger.info("User %s unsubscribed from %s", caller.id, cid)
                return SubscriptionToggleResponse(subscribed=False)

            db.add(Subscription(subscriber_id=caller.id, channel_id=cid))
            await db.flush()
        except VideoTubeError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error toggling subscription to %s: %s", cid, str(e))
            raise DatabaseError(context={"channel_id": str(cid)})

        logger.info("User %s subscribed to %s", caller.id, cid)
        return SubscriptionToggleResponse(subscribed=True)

    async def list_channel_subscribers(
        self, db: AsyncSession, channel_id: str
    ) -> List[SubscriberResponse]:
        cid = parse_id(channel_id, "Channel")
        stmt = (
            select(Subscription)
            .options(joinedload(Subscription.subscriber))
            .where(Subscription.channel_id == cid)
            .order_by(Subscription.created_at.desc())
        )
        try:
            rows = (await db.execute(stmt)).scalars().all()
        except SQLAlchemyError as e:
            logger.error("Database error listing subscribers of %s: %s", cid, str(e))
            raise DatabaseError(message="Could not retrieve subscribers. Please try again.")

        return [SubscriberResponse.model_validate(row) for row in rows]

    async def list_subscribed_channels(
        self, db: AsyncSession, subscriber_id: str
    ) -> List[SubscribedChannelResponse]:
        sid = parse_id(subscriber_id, "Subscriber")
        stmt = (
            select(Subscription)
            .options(joinedload(Subscription.channel))
            .where(Subscription.subscriber_id == sid)
            .order_by(Subscription.created_at.desc())
        )
        try:
            rows = (await db.execute(stmt)).scalars().all()
        except SQLAlchemyError as e:
            logger.error("Database error listing channels followed by %s: %s", sid, str(e))
            raise DatabaseError(message="Could not retrieve subscribed channels. Please try again.")

        return [SubscribedChannelResponse.model_validate(row) for row in rows]


subscription_service = SubscriptionService()
