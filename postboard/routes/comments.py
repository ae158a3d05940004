"""
Postboard — Comments Route Handlers
=====================================

What:  /api/comments: create (any caller), list (admin), edit (author) and
       delete (author or admin).
"""

import uuid
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from postboard.database import get_db_session
from postboard.middleware.auth import require_admin, verify_token
from postboard.middleware.validate_id import validate_object_id
from postboard.schemas.comment import (
    CommentCreate,
    CommentResponse,
    CommentUpdate,
    CommentWithAuthorResponse,
)
from postboard.schemas.common import ErrorResponse, MessageResponse
from postboard.security import Identity
from postboard.services.comment_service import comment_service

router = APIRouter(prefix="/api/comments", tags=["Comments"])

_errors = {
    400: {"description": "Invalid input", "model": ErrorResponse},
    401: {"description": "Missing or invalid token", "model": ErrorResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}


@router.post(
    "",
    status_code=201,
    response_model=CommentResponse,
    responses={**_errors, 404: {"description": "Post not found", "model": ErrorResponse}},
    summary="Comment on a post",
)
async def create_comment(
    payload: CommentCreate,
    identity: Identity = Depends(verify_token),
    db: AsyncSession = Depends(get_db_session),
) -> CommentResponse:
    return await comment_service.create_comment(db, payload, identity)


@router.get(
    "",
    response_model=List[CommentWithAuthorResponse],
    responses={**_errors, 403: {"description": "Admin only", "model": ErrorResponse}},
    summary="List every comment (admin)",
)
async def list_comments(
    identity: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
) -> List[CommentWithAuthorResponse]:
    return await comment_service.list_comments(db)


@router.put(
    "/{id}",
    response_model=CommentResponse,
    responses={
        **_errors,
        403: {"description": "Not the author", "model": ErrorResponse},
        404: {"description": "Comment not found", "model": ErrorResponse},
    },
    summary="Edit a comment (author only)",
)
async def update_comment(
    payload: CommentUpdate,
    comment_id: uuid.UUID = Depends(validate_object_id),
    identity: Identity = Depends(verify_token),
    db: AsyncSession = Depends(get_db_session),
) -> CommentResponse:
    return await comment_service.update_comment(db, comment_id, payload, identity)


@router.delete(
    "/{id}",
    response_model=MessageResponse,
    responses={
        **_errors,
        403: {"description": "Neither author nor admin", "model": ErrorResponse},
        404: {"description": "Comment not found", "model": ErrorResponse},
    },
    summary="Delete a comment (author or admin)",
)
async def delete_comment(
    comment_id: uuid.UUID = Depends(validate_object_id),
    identity: Identity = Depends(verify_token),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await comment_service.delete_comment(db, comment_id, identity)
