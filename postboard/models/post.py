"""
Postboard — Post & PostLike SQLAlchemy Models
===============================================

What:  ORM models for the `posts` table and the `post_likes` relation.
Who:   PostService for CRUD and like toggling; Alembic for the schema.

Table Design:
    - posts.user_id: exactly one owner, set from the verified token on create
    - posts.category: optional category title used for filtering
    - post_likes: composite primary key (post_id, user_id), so a user can
      appear in a post's likes at most once
    - idx_posts_created_at: every listing is "newest first"

Query Patterns:
    - Page:     ORDER BY created_at DESC OFFSET (n-1)*3 LIMIT 3
    - Category: WHERE category = :c ORDER BY created_at DESC
    - Toggle:   SELECT id FROM posts WHERE id = :id FOR UPDATE, then
                DELETE or INSERT on post_likes in the same transaction
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, List

from sqlalchemy import DateTime, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from postboard.database import Base
from postboard.models.user import utcnow

if TYPE_CHECKING:
    from postboard.models.comment import Comment
    from postboard.models.user import User


class PostLike(Base):
    """Membership of one user in one post's likes set."""

    __tablename__ = "post_likes"

    post_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    def __repr__(self) -> str:
        return f"<PostLike(post_id={self.post_id}, user_id={self.user_id})>"


class Post(Base):
    """
    A post owned by one user.

    Lifecycle:
        1. Created by an authenticated user (owner = token identity)
        2. Title/description/category edited by the owner only
        3. Liked/unliked by any authenticated user
        4. Deleted by the owner or an administrator, together with its
           comments and likes
    """

    __tablename__ = "posts"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    title: Mapped[str] = mapped_column(String(200), nullable=False)

    description: Mapped[str] = mapped_column(Text, nullable=False)

    category: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    # ── Relationships (always loaded explicitly with selectinload) ────────
    user: Mapped["User"] = relationship(back_populates="posts")

    likes: Mapped[List[PostLike]] = relationship(
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by=PostLike.created_at,
    )

    comments: Mapped[List["Comment"]] = relationship(
        back_populates="post",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Comment.created_at",
    )

    __table_args__ = (
        Index("idx_posts_created_at", created_at.desc()),
    )

    @property
    def like_ids(self) -> List[uuid.UUID]:
        """User ids in the likes set, in the order the likes were given."""
        return [like.user_id for like in self.likes]

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, title='{self.title}', user_id={self.user_id})>"
