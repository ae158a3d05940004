"""
Postboard — Users Route Handlers
==================================

What:  /api/users: profile listing (admin), public profile pages, self
       edit, self-or-admin delete and user count (admin).
How:   Who-may-act rules live entirely in the guards (require_self,
       require_self_or_admin, require_admin) because they compare the
       caller against the path id; the service only touches rows.
"""

import uuid
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from postboard.database import get_db_session
from postboard.middleware.auth import require_admin, require_self, require_self_or_admin
from postboard.middleware.validate_id import validate_object_id
from postboard.schemas.common import ErrorResponse, MessageResponse
from postboard.schemas.profile import UserProfileResponse
from postboard.schemas.user import UserSummary, UserUpdate
from postboard.security import Identity
from postboard.services.user_service import user_service

router = APIRouter(prefix="/api/users", tags=["Users"])

_guarded = {
    400: {"description": "Invalid input", "model": ErrorResponse},
    401: {"description": "Missing or invalid token", "model": ErrorResponse},
    403: {"description": "Not allowed", "model": ErrorResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}


@router.get(
    "/profile",
    response_model=List[UserSummary],
    responses=_guarded,
    summary="List all users (admin)",
)
async def list_users(
    identity: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
) -> List[UserSummary]:
    return await user_service.list_users(db)


@router.get(
    "/count",
    response_model=int,
    responses=_guarded,
    summary="Number of registered users (admin)",
)
async def count_users(
    identity: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
) -> int:
    return await user_service.count_users(db)


@router.get(
    "/profile/{id}",
    response_model=UserProfileResponse,
    responses={
        400: {"description": "Invalid id", "model": ErrorResponse},
        404: {"description": "User not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="A user's public profile with their posts",
)
async def get_profile(
    user_id: uuid.UUID = Depends(validate_object_id),
    db: AsyncSession = Depends(get_db_session),
) -> UserProfileResponse:
    return await user_service.get_profile(db, user_id)


@router.put(
    "/profile/{id}",
    response_model=UserSummary,
    responses={**_guarded, 404: {"description": "User not found", "model": ErrorResponse}},
    summary="Update your own profile",
)
async def update_profile(
    payload: UserUpdate,
    user_id: uuid.UUID = Depends(validate_object_id),
    identity: Identity = Depends(require_self),
    db: AsyncSession = Depends(get_db_session),
) -> UserSummary:
    return await user_service.update_profile(db, user_id, payload)


@router.delete(
    "/profile/{id}",
    response_model=MessageResponse,
    responses={**_guarded, 404: {"description": "User not found", "model": ErrorResponse}},
    summary="Delete a profile (the user themself or admin)",
)
async def delete_profile(
    user_id: uuid.UUID = Depends(validate_object_id),
    identity: Identity = Depends(require_self_or_admin),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await user_service.delete_profile(db, user_id)
