"""VideoTube Backend - Comment Schemas"""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from app.schemas.common import UserSummary


class CommentCreate(BaseModel):
    # Emptiness is a business rule checked by the service (400, not 422)
    content: str = Field(default="", max_length=5000)


class CommentUpdate(CommentCreate):
    pass


class CommentResponse(BaseModel):
    id: uuid.UUID
    content: str
    video_id: uuid.UUID
    owner_id: uuid.UUID
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class CommentWithOwner(CommentResponse):
    owner: UserSummary
