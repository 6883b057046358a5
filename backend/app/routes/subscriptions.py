"""VideoTube Backend - Subscription Route Handlers (/api/v1/subscriptions)."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import get_current_user
from app.database import get_db_session
from app.models.user import User
from app.schemas.common import ApiResponse, ErrorResponse
from app.schemas.subscription import (
    SubscribedChannelResponse,
    SubscriberResponse,
    SubscriptionToggleResponse,
)
from app.services.subscription_service import subscription_service

router = APIRouter(
    prefix="/api/v1/subscriptions",
    tags=["Subscriptions"],
    dependencies=[Depends(get_current_user)],
    responses={
        400: {"description": "Invalid ID", "model": ErrorResponse},
        401: {"description": "Missing or invalid access token", "model": ErrorResponse},
    },
)


@router.post(
    "/c/{channel_id}",
    response_model=ApiResponse[SubscriptionToggleResponse],
    responses={404: {"description": "Channel not found", "model": ErrorResponse}},
    summary="Subscribe to or unsubscribe from a channel",
)
async def toggle_subscription(
    channel_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
):
    result = await subscription_service.toggle_subscription(db, user, channel_id)
    message = "Subscribed successfully" if result.subscribed else "Unsubscribed successfully"
    return ApiResponse.ok(result, message)


@router.get(
    "/c/{channel_id}",
    response_model=ApiResponse[List[SubscriberResponse]],
    summary="Who follows this channel",
)
async def get_user_channel_subscribers(channel_id: str, db: AsyncSession = Depends(get_db_session)):
    subscribers = await subscription_service.list_channel_subscribers(db, channel_id)
    return ApiResponse.ok(subscribers, "Subscribers fetched successfully")


@router.get(
    "/u/{subscriber_id}",
    response_model=ApiResponse[List[SubscribedChannelResponse]],
    summary="Channels this user follows",
)
async def get_subscribed_channels(subscriber_id: str, db: AsyncSession = Depends(get_db_session)):
    channels = await subscription_service.list_subscribed_channels(db, subscriber_id)
    return ApiResponse.ok(channels, "Subscribed channels fetched successfully")
