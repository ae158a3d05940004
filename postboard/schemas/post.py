"""
Postboard — Post Request/Response Schemas
===========================================

What:  Pydantic models defining the posts API contract.
How:   Request models carry the validation rules (lengths, required
       fields, forbidden extras). Response models are built from ORM
       objects by explicit constructors, so every relation that appears in
       a response was loaded by the service that produced it.

Response shapes:
    PostRecord          user as id      (create, toggle like)
    PostResponse        user populated  (list)
    PostDetailResponse  user populated + comments (get, update)
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from postboard.models.post import Post
from postboard.schemas.comment import CommentResponse
from postboard.schemas.user import UserSummary
from postboard.schemas.validation import StrictPayload, reject_null

TITLE_MIN, TITLE_MAX = 3, 200
DESCRIPTION_MIN, DESCRIPTION_MAX = 10, 50_000
CATEGORY_MAX = 100


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class PostCreate(StrictPayload):
    """Body of POST /api/posts. The owner always comes from the token."""
    title: str = Field(min_length=TITLE_MIN, max_length=TITLE_MAX)
    description: str = Field(min_length=DESCRIPTION_MIN, max_length=DESCRIPTION_MAX)
    category: Optional[str] = Field(default=None, max_length=CATEGORY_MAX)


class PostUpdate(StrictPayload):
    """
    Body of PUT /api/posts/{id}.

    Every field is optional; fields that are present are validated with the
    same bounds as creation. Ownership and likes cannot be sent here.
    """
    title: Optional[str] = Field(default=None, min_length=TITLE_MIN, max_length=TITLE_MAX)
    description: Optional[str] = Field(
        default=None, min_length=DESCRIPTION_MIN, max_length=DESCRIPTION_MAX
    )
    category: Optional[str] = Field(default=None, max_length=CATEGORY_MAX)

    check_not_null = field_validator("title", "description")(reject_null)


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class PostRecord(BaseModel):
    """A post as stored: owner and likes as ids."""
    id: uuid.UUID
    title: str
    description: str
    category: Optional[str] = None
    user: uuid.UUID = Field(description="Owner id")
    likes: List[uuid.UUID] = Field(default_factory=list, description="Ids of liking users")
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, post: Post) -> "PostRecord":
        return cls(
            id=post.id,
            title=post.title,
            description=post.description,
            category=post.category,
            user=post.user_id,
            likes=post.like_ids,
            created_at=post.created_at,
            updated_at=post.updated_at,
        )


class PostResponse(BaseModel):
    """A post with its owner populated (password never included)."""
    id: uuid.UUID
    title: str
    description: str
    category: Optional[str] = None
    user: UserSummary
    likes: List[uuid.UUID] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, post: Post) -> "PostResponse":
        return cls(
            id=post.id,
            title=post.title,
            description=post.description,
            category=post.category,
            user=UserSummary.model_validate(post.user),
            likes=post.like_ids,
            created_at=post.created_at,
            updated_at=post.updated_at,
        )


class PostDetailResponse(PostResponse):
    """A post with owner and comments populated."""
    comments: List[CommentResponse] = Field(default_factory=list)

    @classmethod
    def from_model(cls, post: Post) -> "PostDetailResponse":
        base = PostResponse.from_model(post)
        return cls(
            **base.model_dump(exclude={"user"}),
            user=base.user,
            comments=[CommentResponse.model_validate(c) for c in post.comments],
        )


class PostCreatedResponse(BaseModel):
    message: str = Field(default="Post created successfully")
    post: PostRecord


class PostDeletedResponse(BaseModel):
    message: str = Field(default="Post has been deleted successfully")
    post_id: uuid.UUID = Field(serialization_alias="postId")
