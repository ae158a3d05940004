"""
Postboard — User Schemas
==========================

No response model in this module has a password field; the hash stays on
the ORM object.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from postboard.schemas.validation import StrictPayload


class UserSummary(BaseModel):
    """A user as embedded in posts and comments (password stripped)."""
    id: uuid.UUID
    username: str
    email: str
    bio: Optional[str] = None
    is_admin: bool = False
    created_at: datetime

    model_config = {"from_attributes": True}


class UserUpdate(StrictPayload):
    username: Optional[str] = Field(default=None, min_length=2, max_length=100)
    password: Optional[str] = Field(default=None, min_length=8, max_length=128)
    bio: Optional[str] = Field(default=None, max_length=2000)
