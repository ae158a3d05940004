"""
Postboard — Category Schemas
==============================
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from postboard.schemas.validation import StrictPayload


class CategoryCreate(StrictPayload):
    title: str = Field(min_length=2, max_length=100)


class CategoryResponse(BaseModel):
    id: uuid.UUID
    title: str
    user_id: Optional[uuid.UUID] = Field(default=None, description="Admin who created it")
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class CategoryDeletedResponse(BaseModel):
    message: str = Field(default="Category has been deleted successfully")
    category_id: uuid.UUID = Field(serialization_alias="categoryId")
