"""
Postboard — Categories Route Handlers
=======================================

What:  /api/categories: administrators create and delete categories;
       anyone may list them.
"""

import uuid
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from postboard.database import get_db_session
from postboard.middleware.auth import require_admin
from postboard.middleware.validate_id import validate_object_id
from postboard.schemas.category import (
    CategoryCreate,
    CategoryDeletedResponse,
    CategoryResponse,
)
from postboard.schemas.common import ErrorResponse
from postboard.security import Identity
from postboard.services.category_service import category_service

router = APIRouter(prefix="/api/categories", tags=["Categories"])

_admin_errors = {
    400: {"description": "Invalid input or duplicate title", "model": ErrorResponse},
    401: {"description": "Missing or invalid token", "model": ErrorResponse},
    403: {"description": "Admin only", "model": ErrorResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}


@router.post(
    "",
    status_code=201,
    response_model=CategoryResponse,
    responses=_admin_errors,
    summary="Create a category (admin)",
)
async def create_category(
    payload: CategoryCreate,
    identity: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
) -> CategoryResponse:
    return await category_service.create_category(db, payload, identity)


@router.get(
    "",
    response_model=List[CategoryResponse],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List categories, oldest first",
)
async def list_categories(db: AsyncSession = Depends(get_db_session)) -> List[CategoryResponse]:
    return await category_service.list_categories(db)


@router.delete(
    "/{id}",
    response_model=CategoryDeletedResponse,
    responses={**_admin_errors, 404: {"description": "Category not found", "model": ErrorResponse}},
    summary="Delete a category (admin)",
)
async def delete_category(
    category_id: uuid.UUID = Depends(validate_object_id),
    identity: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
) -> CategoryDeletedResponse:
    return await category_service.delete_category(db, category_id)
