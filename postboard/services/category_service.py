"""
Postboard — Category Service
==============================

What:  Create (admin), list (public) and delete (admin) categories.
"""

import logging
import uuid
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from postboard.exceptions import (
    AuthenticationError,
    ConflictError,
    DatabaseError,
    NotFoundError,
    PostboardError,
)
from postboard.models.category import Category
from postboard.models.user import User
from postboard.schemas.category import (
    CategoryCreate,
    CategoryDeletedResponse,
    CategoryResponse,
)
from postboard.security import Identity
from postboard.services.retry import read_with_retry

logger = logging.getLogger(__name__)


class CategoryService:

    async def create_category(
        self, db: AsyncSession, payload: CategoryCreate, identity: Identity
    ) -> CategoryResponse:
        try:
            if await db.get(User, identity.id) is None:
                raise AuthenticationError("User not found, access denied")

            existing = await db.execute(select(Category.id).where(Category.title == payload.title))
            if existing.scalar_one_or_none() is not None:
                raise ConflictError("Category already exists", context={"field": "title"})

            category = Category(title=payload.title, user_id=identity.id)
            db.add(category)
            await db.flush()
            logger.info("Category '%s' created by admin %s", category.title, identity.id)
            return CategoryResponse.model_validate(category)

        except PostboardError:
            raise
        except IntegrityError as e:
            raise ConflictError("Category already exists", context={"field": "title"}) from e
        except Exception as e:
            logger.error("Error creating category: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to create category, please try again.",
                context={"error_type": type(e).__name__},
            ) from e

    async def list_categories(self, db: AsyncSession) -> List[CategoryResponse]:
        async def fetch():
            result = await db.execute(select(Category).order_by(Category.created_at.asc()))
            return list(result.scalars().all())

        try:
            categories = await read_with_retry(db, fetch)
            return [CategoryResponse.model_validate(c) for c in categories]
        except Exception as e:
            logger.error("Error fetching categories: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Error fetching categories",
                context={"error_type": type(e).__name__},
            ) from e

    async def delete_category(
        self, db: AsyncSession, category_id: uuid.UUID
    ) -> CategoryDeletedResponse:
        """Posts keep their category title after the category is removed."""
        try:
            category = await db.get(Category, category_id)
            if category is None:
                raise NotFoundError(resource="category", resource_id=str(category_id))

            await db.delete(category)
            await db.flush()
            logger.info("Category '%s' deleted", category.title)
            return CategoryDeletedResponse(category_id=category_id)

        except PostboardError:
            raise
        except Exception as e:
            logger.error("Error deleting category %s: %s", category_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Error deleting the category",
                context={"category_id": str(category_id), "error_type": type(e).__name__},
            ) from e


category_service = CategoryService()
