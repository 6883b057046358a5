"""
VideoTube Backend - Playlist Schemas
======================================

PlaylistResponse lists member video IDs only; PlaylistDetailResponse
(GET /playlist/{id}) populates them with full video records.
"""

import uuid
from datetime import datetime
from typing import Any, List

from pydantic import BaseModel, Field, field_validator

from app.schemas.video import VideoResponse


class PlaylistCreate(BaseModel):
    name: str = Field(default="", max_length=100)
    description: str = Field(default="", max_length=5000)


class PlaylistUpdate(PlaylistCreate):
    pass


class PlaylistResponse(BaseModel):
    id: uuid.UUID
    name: str
    description: str
    owner_id: uuid.UUID
    videos: List[uuid.UUID] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

    @field_validator("videos", mode="before")
    @classmethod
    def videos_to_ids(cls, value: Any) -> Any:
        """The ORM collection holds Video objects; this projection keeps their IDs."""
        return [getattr(video, "id", video) for video in value or []]


class PlaylistDetailResponse(BaseModel):
    id: uuid.UUID
    name: str
    description: str
    owner_id: uuid.UUID
    videos: List[VideoResponse] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
