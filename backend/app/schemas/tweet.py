"""VideoTube Backend - Tweet Schemas"""

import uuid
from datetime import datetime

from pydantic import AliasChoices, BaseModel, Field

from app.schemas.common import UserSummary


class TweetCreate(BaseModel):
    content: str = Field(default="", max_length=1000)


class TweetUpdate(TweetCreate):
    pass


class TweetResponse(BaseModel):
    id: uuid.UUID
    content: str
    owner_id: uuid.UUID
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TweetWithOwner(TweetResponse):
    owner_details: UserSummary = Field(validation_alias=AliasChoices("owner_details", "owner"))
