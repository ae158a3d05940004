"""
Postboard — Posts Route Handlers
==================================

What:  /api/posts: create, list, count, get, update, delete, toggle like.
How:   Thin handlers. Guards run as dependencies in the order they are
       declared (id shape, then token), then the handler delegates to
       PostService.
Who:   Any API client holding a bearer token (count and get are public).

Route order matters: /count and /like/{id} are declared before /{id} so
they are not captured by the id route.
"""

import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from postboard.database import get_db_session
from postboard.middleware.auth import verify_token
from postboard.middleware.validate_id import validate_object_id
from postboard.schemas.common import ErrorResponse
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
from postboard.services.post_service import post_service

# ── Router Configuration ──────────────────────────────────────────────────
router = APIRouter(prefix="/api/posts", tags=["Posts"])

_errors = {
    400: {"description": "Invalid input", "model": ErrorResponse},
    401: {"description": "Missing or invalid token", "model": ErrorResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}


@router.post(
    "",
    status_code=201,
    response_model=PostCreatedResponse,
    responses=_errors,
    summary="Create a post owned by the caller",
)
async def create_post(
    payload: PostCreate,
    identity: Identity = Depends(verify_token),
    db: AsyncSession = Depends(get_db_session),
) -> PostCreatedResponse:
    return await post_service.create_post(db, payload, identity)


@router.get(
    "",
    response_model=List[PostResponse],
    responses=_errors,
    summary="List posts newest first",
    description=(
        "With `pageNumber`, returns that page of 3 posts. Otherwise, with "
        "`category`, returns every post in that category. Otherwise returns "
        "every post."
    ),
)
async def list_posts(
    page_number: Optional[int] = Query(
        default=None, alias="pageNumber", ge=1, description="1-based page of 3 posts"
    ),
    category: Optional[str] = Query(default=None, description="Category title filter"),
    identity: Identity = Depends(verify_token),
    db: AsyncSession = Depends(get_db_session),
) -> List[PostResponse]:
    return await post_service.list_posts(db, page_number=page_number, category=category)


@router.get(
    "/count",
    response_model=int,
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="Total number of posts",
)
async def count_posts(db: AsyncSession = Depends(get_db_session)) -> int:
    return await post_service.count_posts(db)


@router.put(
    "/like/{id}",
    response_model=PostRecord,
    responses={**_errors, 404: {"description": "Post not found", "model": ErrorResponse}},
    summary="Like or unlike a post",
)
async def toggle_like(
    post_id: uuid.UUID = Depends(validate_object_id),
    identity: Identity = Depends(verify_token),
    db: AsyncSession = Depends(get_db_session),
) -> PostRecord:
    return await post_service.toggle_like(db, post_id, identity)


@router.get(
    "/{id}",
    response_model=PostDetailResponse,
    responses={
        400: {"description": "Invalid id", "model": ErrorResponse},
        404: {"description": "Post not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Get a post with its owner and comments",
)
async def get_post(
    post_id: uuid.UUID = Depends(validate_object_id),
    db: AsyncSession = Depends(get_db_session),
) -> PostDetailResponse:
    return await post_service.get_post(db, post_id)


@router.put(
    "/{id}",
    response_model=PostDetailResponse,
    responses={
        **_errors,
        403: {"description": "Not the owner", "model": ErrorResponse},
        404: {"description": "Post not found", "model": ErrorResponse},
    },
    summary="Update a post (owner only)",
)
async def update_post(
    payload: PostUpdate,
    post_id: uuid.UUID = Depends(validate_object_id),
    identity: Identity = Depends(verify_token),
    db: AsyncSession = Depends(get_db_session),
) -> PostDetailResponse:
    return await post_service.update_post(db, post_id, payload, identity)


@router.delete(
    "/{id}",
    response_model=PostDeletedResponse,
    responses={
        **_errors,
        403: {"description": "Neither owner nor admin", "model": ErrorResponse},
        404: {"description": "Post not found", "model": ErrorResponse},
    },
    summary="Delete a post (owner or admin)",
)
async def delete_post(
    post_id: uuid.UUID = Depends(validate_object_id),
    identity: Identity = Depends(verify_token),
    db: AsyncSession = Depends(get_db_session),
) -> PostDeletedResponse:
    return await post_service.delete_post(db, post_id, identity)
