"""
Postboard — User Service
==========================

What:  User profiles: list (admin), get with posts, update self, delete
       (self or admin), count (admin).
How:   Route guards have already decided who may call each method; this
       service only loads, changes and removes rows.
"""

import logging
import uuid
from typing import List

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from postboard.exceptions import DatabaseError, NotFoundError, PostboardError
from postboard.models.comment import Comment
from postboard.models.post import Post, PostLike
from postboard.models.user import User
from postboard.schemas.common import MessageResponse
from postboard.schemas.profile import UserProfileResponse
from postboard.schemas.user import UserSummary, UserUpdate
from postboard.security import hash_password
from postboard.services.retry import read_with_retry

logger = logging.getLogger(__name__)


class UserService:

    async def list_users(self, db: AsyncSession) -> List[UserSummary]:
        async def fetch():
            result = await db.execute(select(User).order_by(User.created_at.desc()))
            return list(result.scalars().all())

        try:
            users = await read_with_retry(db, fetch)
            return [UserSummary.model_validate(user) for user in users]
        except Exception as e:
            logger.error("Error fetching users: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Error fetching users",
                context={"error_type": type(e).__name__},
            ) from e

    async def get_profile(self, db: AsyncSession, user_id: uuid.UUID) -> UserProfileResponse:
        async def fetch():
            result = await db.execute(
                select(User)
                .where(User.id == user_id)
                .options(
                    selectinload(User.posts).selectinload(Post.user),
                    selectinload(User.posts).selectinload(Post.likes),
                )
            )
            return result.scalar_one_or_none()

        try:
            user = await read_with_retry(db, fetch)
            if user is None:
                raise NotFoundError(resource="user", resource_id=str(user_id))
            return UserProfileResponse.from_model(user)

        except PostboardError:
            raise
        except Exception as e:
            logger.error("Error fetching user %s: %s", user_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Error fetching the user profile",
                context={"user_id": str(user_id), "error_type": type(e).__name__},
            ) from e

    async def update_profile(
        self, db: AsyncSession, user_id: uuid.UUID, payload: UserUpdate
    ) -> UserSummary:
        """Partial update; a new password is hashed before it is stored."""
        try:
            user = await db.get(User, user_id)
            if user is None:
                raise NotFoundError(resource="user", resource_id=str(user_id))

            changes = payload.model_dump(exclude_unset=True)
            for field, value in changes.items():
                if value is None and field != "bio":
                    continue
                if field == "password":
                    value = hash_password(value)
                setattr(user, field, value)
            await db.flush()
            await db.refresh(user)
            logger.info("User %s updated (%s)", user_id, ", ".join(sorted(changes)) or "no fields")
            return UserSummary.model_validate(user)

        except PostboardError:
            raise
        except Exception as e:
            logger.error("Error updating user %s: %s", user_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Error updating the user profile",
                context={"user_id": str(user_id), "error_type": type(e).__name__},
            ) from e

    async def delete_profile(self, db: AsyncSession, user_id: uuid.UUID) -> MessageResponse:
        """
        Remove a user with everything they own: their posts (and the
        comments/likes on those posts), their comments and their likes.
        """
        try:
            user = await db.get(User, user_id)
            if user is None:
                raise NotFoundError(resource="user", resource_id=str(user_id))

            owned_posts = select(Post.id).where(Post.user_id == user_id)
            await db.execute(
                delete(PostLike).where(
                    or_(PostLike.user_id == user_id, PostLike.post_id.in_(owned_posts))
                ).execution_options(synchronize_session=False)
            )
            await db.execute(
                delete(Comment).where(
                    or_(Comment.user_id == user_id, Comment.post_id.in_(owned_posts))
                ).execution_options(synchronize_session=False)
            )
            await db.execute(delete(Post).where(Post.user_id == user_id))
            await db.execute(delete(User).where(User.id == user_id))
            logger.info("User %s deleted", user_id)
            return MessageResponse(message="User profile has been deleted")

        except PostboardError:
            raise
        except Exception as e:
            logger.error("Error deleting user %s: %s", user_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Error deleting the user profile",
                context={"user_id": str(user_id), "error_type": type(e).__name__},
            ) from e

    async def count_users(self, db: AsyncSession) -> int:
        async def fetch():
            result = await db.execute(select(func.count(User.id)))
            return result.scalar() or 0

        try:
            return await read_with_retry(db, fetch)
        except Exception as e:
            logger.error("Error counting users: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Error counting users",
                context={"error_type": type(e).__name__},
            ) from e


user_service = UserService()
