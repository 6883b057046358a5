"""VideoTube Backend - Subscription Schemas"""

import uuid
from datetime import datetime

from pydantic import AliasChoices, BaseModel, Field

from app.schemas.common import UserSummary


class SubscriptionToggleResponse(BaseModel):
    subscribed: bool


class SubscriberResponse(BaseModel):
    """Someone following the channel."""

    id: uuid.UUID
    subscriber_details: UserSummary = Field(
        validation_alias=AliasChoices("subscriber_details", "subscriber")
    )
    created_at: datetime

    model_config = {"from_attributes": True}


class SubscribedChannelResponse(BaseModel):
    """A channel the user follows."""

    id: uuid.UUID
    subscribed_channel: UserSummary = Field(
        validation_alias=AliasChoices("subscribed_channel", "channel")
    )
    created_at: datetime

    model_config = {"from_attributes": True}
