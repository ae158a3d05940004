"""
Postboard — ORM Models
========================

Importing this package registers every table with Base.metadata, which the
string-based relationship() targets and Alembic autogenerate rely on.
"""

from postboard.models.user import User
from postboard.models.category import Category
from postboard.models.post import Post, PostLike
from postboard.models.comment import Comment

__all__ = ["User", "Category", "Post", "PostLike", "Comment"]
