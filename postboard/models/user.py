"""
Postboard — User SQLAlchemy Model
===================================

What:  ORM model for the `users` table.
Who:   Auth service (register/login), user service (profiles), and the
       owner side of posts and comments.

Table Design:
    - UUID primary key assigned on insert
    - email: unique, used as the login identifier
    - password: bcrypt hash; never placed in any response schema
    - is_admin: grants delete rights on any post/comment and admin-only routes
"""

import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING, List

from sqlalchemy import Boolean, DateTime, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from postboard.database import Base

if TYPE_CHECKING:
    from postboard.models.comment import Comment
    from postboard.models.post import Post


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """A registered account."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    username: Mapped[str] = mapped_column(String(100), nullable=False)

    email: Mapped[str] = mapped_column(String(100), nullable=False, unique=True, index=True)

    # bcrypt hash (60 chars)
    password: Mapped[str] = mapped_column(String(255), nullable=False)

    bio: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)

    is_admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    # ── Relationships ─────────────────────────────────────────────────────
    # Deleting a user removes everything they own
    posts: Mapped[List["Post"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Post.created_at.desc()",
    )
    comments: Mapped[List["Comment"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}', is_admin={self.is_admin})>"
