"""
Postboard — Comment Service
=============================

What:  Create, list (admin), edit (author only) and delete (author or admin)
       comments.
"""

import logging
import uuid
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from postboard.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DatabaseError,
    NotFoundError,
    PostboardError,
)
from postboard.models.comment import Comment
from postboard.models.post import Post
from postboard.models.user import User
from postboard.schemas.comment import (
    CommentCreate,
    CommentResponse,
    CommentUpdate,
    CommentWithAuthorResponse,
)
from postboard.schemas.common import MessageResponse
from postboard.security import Identity
from postboard.services.retry import read_with_retry

logger = logging.getLogger(__name__)


class CommentService:

    async def create_comment(
        self, db: AsyncSession, payload: CommentCreate, identity: Identity
    ) -> CommentResponse:
        """
        Attach a comment to an existing post; the author's username is copied
        onto the comment.

        Raises:
            NotFoundError: the post does not exist (→ 404)
        """
        try:
            author = await db.get(User, identity.id)
            if author is None:
                raise AuthenticationError("User not found, access denied")

            if await db.get(Post, payload.post_id) is None:
                raise NotFoundError(resource="post", resource_id=str(payload.post_id))

            comment = Comment(
                post_id=payload.post_id,
                user_id=identity.id,
                username=author.username,
                text=payload.text,
            )
            db.add(comment)
            await db.flush()
            logger.info("Comment %s added to post %s", comment.id, payload.post_id)
            return CommentResponse.model_validate(comment)

        except PostboardError:
            raise
        except Exception as e:
            logger.error("Error creating comment: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to create comment, please try again.",
                context={"error_type": type(e).__name__},
            ) from e

    async def list_comments(self, db: AsyncSession) -> List[CommentWithAuthorResponse]:
        async def fetch():
            result = await db.execute(
                select(Comment)
                .options(selectinload(Comment.user))
                .order_by(Comment.created_at.desc())
            )
            return list(result.scalars().all())

        try:
            comments = await read_with_retry(db, fetch)
            return [CommentWithAuthorResponse.model_validate(c) for c in comments]
        except Exception as e:
            logger.error("Error fetching comments: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Error fetching comments",
                context={"error_type": type(e).__name__},
            ) from e

    async def update_comment(
        self,
        db: AsyncSession,
        comment_id: uuid.UUID,
        payload: CommentUpdate,
        identity: Identity,
    ) -> CommentResponse:
        try:
            comment = await db.get(Comment, comment_id)
            if comment is None:
                raise NotFoundError(resource="comment", resource_id=str(comment_id))

            if identity.id != comment.user_id:
                raise AuthorizationError(
                    "Access denied, only the author of the comment can edit it"
                )

            comment.text = payload.text
            await db.flush()
            await db.refresh(comment)
            return CommentResponse.model_validate(comment)

        except PostboardError:
            raise
        except Exception as e:
            logger.error("Error updating comment %s: %s", comment_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Error updating the comment",
                context={"comment_id": str(comment_id), "error_type": type(e).__name__},
            ) from e

    async def delete_comment(
        self, db: AsyncSession, comment_id: uuid.UUID, identity: Identity
    ) -> MessageResponse:
        try:
            comment = await db.get(Comment, comment_id)
            if comment is None:
                raise NotFoundError(resource="comment", resource_id=str(comment_id))

            if not (identity.is_admin or identity.id == comment.user_id):
                raise AuthorizationError("Access denied, forbidden")

            await db.delete(comment)
            await db.flush()
            logger.info("Comment %s deleted by user %s", comment_id, identity.id)
            return MessageResponse(message="Comment has been deleted")

        except PostboardError:
            raise
        except Exception as e:
            logger.error("Error deleting comment %s: %s", comment_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Error deleting the comment",
                context={"comment_id": str(comment_id), "error_type": type(e).__name__},
            ) from e


comment_service = CommentService()
