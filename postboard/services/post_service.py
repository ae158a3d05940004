"""
Postboard — Post Service
==========================

What:  Business logic for posts: create, list, get, count, update, delete,
       and like toggling.
How:   Stateless service; each method receives the request's AsyncSession
       and the caller's Identity (where one is needed). Relations are
       loaded with explicit selectinload() options and converted into
       typed response models before returning.
Who:   Called by routes/posts.py.

Authorization rules:
    update   owner only (administrators are refused as well)
    delete   owner or administrator
    like     any authenticated caller

Error Handling Strategy:
    NotFoundError / AuthorizationError propagate unchanged. Anything else
    raised while talking to the database is logged and re-raised as
    DatabaseError carrying the operation message ("Error fetching posts").

Concurrency:
    toggle_like locks the post row (SELECT ... FOR UPDATE) and then deletes
    or inserts the (post, user) like inside the same transaction, so two
    toggles on one post are applied one after the other. Update and delete
    check ownership and then write without a lock; a concurrent change of
    owner between the two statements is not guarded against (owners never
    change through this API).
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from postboard.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DatabaseError,
    PostboardError,
    NotFoundError,
)
from postboard.models.comment import Comment
from postboard.models.post import Post, PostLike
from postboard.models.user import User
from postboard.schemas.post import (
    PostCreate,
    PostCreatedResponse,
    PostDeletedResponse,
    PostDetailResponse,
    PostRecord,
    PostResponse,
    PostUpdate,
)
from postboard.security import Identity
from postboard.services.retry import read_with_retry

logger = logging.getLogger(__name__)

POSTS_PER_PAGE = 3

# Fields a PUT may change; ownership and likes are never writable
UPDATABLE_FIELDS = ("title", "description", "category")


def _with_owner():
    return (selectinload(Post.user), selectinload(Post.likes))


def _with_owner_and_comments():
    return (*_with_owner(), selectinload(Post.comments))


class PostService:
    """
    Orchestrates every posts operation.

    Methods:
        - create_post():  insert a post owned by the caller
        - list_posts():   page / category / all, newest first
        - get_post():     one post with owner and comments
        - count_posts():  total number of posts
        - update_post():  owner-only partial update
        - delete_post():  owner-or-admin delete
        - toggle_like():  flip the caller's like
    """

    async def create_post(
        self, db: AsyncSession, payload: PostCreate, identity: Identity
    ) -> PostCreatedResponse:
        """
        Insert a new post. The owner is the token identity, never the body.

        Raises:
            AuthenticationError: the token's user no longer exists
            DatabaseError: insert failed
        """
        try:
            if await db.get(User, identity.id) is None:
                raise AuthenticationError("User not found, access denied")

            post = Post(
                title=payload.title,
                description=payload.description,
                category=payload.category,
                user_id=identity.id,
                likes=[],
            )
            db.add(post)
            await db.flush()
            logger.info("Post %s created by user %s", post.id, identity.id)

            return PostCreatedResponse(post=PostRecord.from_model(post))

        except PostboardError:
            raise
        except Exception as e:
            logger.error("Error creating post: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to create post, please try again.",
                context={"error_type": type(e).__name__},
            ) from e

    async def list_posts(
        self,
        db: AsyncSession,
        page_number: Optional[int] = None,
        category: Optional[str] = None,
    ) -> List[PostResponse]:
        """
        List posts newest first, owner populated.

        Query modes (page number is checked first):
            page_number → skip (page_number - 1) * 3, take 3
            category    → posts filed under that category
            neither     → every post
        """
        query = select(Post).options(*_with_owner()).order_by(Post.created_at.desc())

        if page_number is not None:
            query = query.offset((page_number - 1) * POSTS_PER_PAGE).limit(POSTS_PER_PAGE)
        elif category:
            query = query.where(Post.category == category)

        async def fetch():
            result = await db.execute(query)
            return list(result.scalars().all())

        try:
            posts = await read_with_retry(db, fetch)
            return [PostResponse.from_model(post) for post in posts]
        except Exception as e:
            logger.error("Error fetching posts: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Error fetching posts",
                context={"error_type": type(e).__name__},
            ) from e

    async def get_post(self, db: AsyncSession, post_id: uuid.UUID) -> PostDetailResponse:
        """
        Raises:
            NotFoundError: no post with this id (→ 404)
            DatabaseError: query failed (→ 500)
        """
        async def fetch():
            result = await db.execute(
                select(Post).where(Post.id == post_id).options(*_with_owner_and_comments())
            )
            return result.scalar_one_or_none()

        try:
            post = await read_with_retry(db, fetch)
            if post is None:
                raise NotFoundError(resource="post", resource_id=str(post_id))
            return PostDetailResponse.from_model(post)

        except PostboardError:
            raise
        except Exception as e:
            logger.error("Error fetching post %s: %s", post_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Error fetching the post",
                context={"post_id": str(post_id), "error_type": type(e).__name__},
            ) from e

    async def count_posts(self, db: AsyncSession) -> int:
        async def fetch():
            result = await db.execute(select(func.count(Post.id)))
            return result.scalar() or 0

        try:
            return await read_with_retry(db, fetch)
        except Exception as e:
            logger.error("Error counting posts: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Error counting posts",
                context={"error_type": type(e).__name__},
            ) from e

    async def delete_post(
        self, db: AsyncSession, post_id: uuid.UUID, identity: Identity
    ) -> PostDeletedResponse:
        """
        Delete a post with its comments and likes.

        Allowed for administrators and for the post's owner.
        """
        try:
            post = await db.get(Post, post_id)
            if post is None:
                raise NotFoundError(resource="post", resource_id=str(post_id))

            if not (identity.is_admin or identity.id == post.user_id):
                logger.info("User %s refused delete of post %s", identity.id, post_id)
                raise AuthorizationError("Access denied, forbidden")

            await db.execute(delete(PostLike).where(PostLike.post_id == post_id))
            await db.execute(delete(Comment).where(Comment.post_id == post_id))
            await db.execute(delete(Post).where(Post.id == post_id))
            logger.info("Post %s deleted by user %s", post_id, identity.id)

            return PostDeletedResponse(post_id=post_id)

        except PostboardError:
            raise
        except Exception as e:
            logger.error("Error deleting post %s: %s", post_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Error deleting the post",
                context={"post_id": str(post_id), "error_type": type(e).__name__},
            ) from e

    async def update_post(
        self,
        db: AsyncSession,
        post_id: uuid.UUID,
        payload: PostUpdate,
        identity: Identity,
    ) -> PostDetailResponse:
        """
        Apply a partial update of title/description/category.

        Only the owner may update; an administrator who is not the owner is
        refused with 403, unlike delete_post.

        Only fields present in the request body are written.
        """
        try:
            post = await db.get(Post, post_id)
            if post is None:
                raise NotFoundError(resource="post", resource_id=str(post_id))

            if identity.id != post.user_id:
                logger.info("User %s refused update of post %s", identity.id, post_id)
                raise AuthorizationError("Access denied, you are not allowed")

            changes = payload.model_dump(exclude_unset=True, include=set(UPDATABLE_FIELDS))
            for field, value in changes.items():
                setattr(post, field, value)
            await db.flush()
            logger.info("Post %s updated (%s)", post_id, ", ".join(sorted(changes)) or "no fields")

            result = await db.execute(
                select(Post)
                .where(Post.id == post_id)
                .options(*_with_owner_and_comments())
                .execution_options(populate_existing=True)
            )
            return PostDetailResponse.from_model(result.scalar_one())

        except PostboardError:
            raise
        except Exception as e:
            logger.error("Error updating post %s: %s", post_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Error updating the post",
                context={"post_id": str(post_id), "error_type": type(e).__name__},
            ) from e

    async def toggle_like(
        self, db: AsyncSession, post_id: uuid.UUID, identity: Identity
    ) -> PostRecord:
        """
        Flip the caller's membership in the post's likes.

        Steps (one transaction):
            1. Lock the post row; missing → NotFoundError
            2. Delete the (post, caller) like
            3. If nothing was deleted, insert it (caller must still exist)
            4. Reload the post with its likes
        """
        try:
            locked = await db.execute(
                select(Post.id).where(Post.id == post_id).with_for_update()
            )
            if locked.scalar_one_or_none() is None:
                raise NotFoundError(resource="post", resource_id=str(post_id))

            removed = await db.execute(
                delete(PostLike).where(
                    PostLike.post_id == post_id,
                    PostLike.user_id == identity.id,
                )
            )
            if removed.rowcount == 0:
                if await db.get(User, identity.id) is None:
                    raise AuthenticationError("User not found, access denied")
                db.add(PostLike(post_id=post_id, user_id=identity.id))
                await db.flush()
                logger.info("User %s liked post %s", identity.id, post_id)
            else:
                logger.info("User %s unliked post %s", identity.id, post_id)

            result = await db.execute(
                select(Post)
                .where(Post.id == post_id)
                .options(selectinload(Post.likes))
                .execution_options(populate_existing=True)
            )
            return PostRecord.from_model(result.scalar_one())

        except PostboardError:
            raise
        except Exception as e:
            logger.error("Error toggling like on post %s: %s", post_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Error toggling like",
                context={"post_id": str(post_id), "error_type": type(e).__name__},
            ) from e


# ── Singleton Instance ────────────────────────────────────────────────────
post_service = PostService()
