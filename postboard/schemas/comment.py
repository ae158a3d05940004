"""
Postboard — Comment Schemas
=============================
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from postboard.schemas.user import UserSummary
from postboard.schemas.validation import StrictPayload

TEXT_MIN, TEXT_MAX = 1, 2000


class CommentCreate(StrictPayload):
    post_id: uuid.UUID = Field(description="Post being commented on")
    text: str = Field(min_length=TEXT_MIN, max_length=TEXT_MAX)


class CommentUpdate(StrictPayload):
    text: str = Field(min_length=TEXT_MIN, max_length=TEXT_MAX)


class CommentResponse(BaseModel):
    id: uuid.UUID
    post_id: uuid.UUID
    user_id: uuid.UUID
    username: str = Field(description="Author's username at the time of commenting")
    text: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class CommentWithAuthorResponse(CommentResponse):
    """GET /api/comments: the comment with its author populated."""
    user: Optional[UserSummary] = None
