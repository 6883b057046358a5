"""VideoTube Backend - Like Schemas"""

import uuid

from pydantic import AliasChoices, BaseModel, Field

from app.schemas.video import VideoWithOwner


class LikeToggleResponse(BaseModel):
    is_liked: bool


class LikedVideoResponse(BaseModel):
    """A like row joined with the liked video and that video's owner."""

    id: uuid.UUID
    video_details: VideoWithOwner = Field(validation_alias=AliasChoices("video_details", "video"))

    model_config = {"from_attributes": True}
