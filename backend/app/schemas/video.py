"""
VideoTube Backend - Video Schemas
===================================

Projections:
    VideoResponse        the video row as stored (minus media object keys)
    VideoDetailResponse  + owner {id, username, avatar, email}
    VideoWithOwner       + owner_details {id, username, full_name, avatar},
                         used inside liked-video listings
"""

import uuid
from datetime import datetime

from pydantic import AliasChoices, BaseModel, Field

from app.schemas.common import OwnerSummary, UserSummary


class VideoResponse(BaseModel):
    id: uuid.UUID
    video_file: str = Field(description="Public URL of the video file")
    thumbnail: str = Field(description="Public URL of the thumbnail image")
    title: str
    description: str
    duration: float = Field(description="Length in seconds")
    views: int
    is_published: bool
    owner_id: uuid.UUID
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class VideoDetailResponse(VideoResponse):
    owner: OwnerSummary


class VideoWithOwner(VideoResponse):
    owner_details: UserSummary = Field(validation_alias=AliasChoices("owner_details", "owner"))


class PublishStatusResponse(BaseModel):
    is_published: bool
