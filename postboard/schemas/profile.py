"""
Postboard — User Profile Schema
=================================

Kept apart from schemas.user so post schemas can embed UserSummary while
the profile embeds post schemas.
"""

from typing import List

from pydantic import Field

from postboard.models.user import User
from postboard.schemas.post import PostResponse
from postboard.schemas.user import UserSummary


class UserProfileResponse(UserSummary):
    """GET /api/users/profile/{id}: the user plus their posts, newest first."""
    posts: List[PostResponse] = Field(default_factory=list)

    @classmethod
    def from_model(cls, user: User) -> "UserProfileResponse":
        summary = UserSummary.model_validate(user)
        return cls(
            **summary.model_dump(),
            posts=[PostResponse.from_model(post) for post in user.posts],
        )
