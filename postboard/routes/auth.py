"""
Postboard — Auth Route Handlers
=================================

What:  POST /api/auth/register and POST /api/auth/login.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from postboard.config import Settings
from postboard.database import get_db_session
from postboard.middleware.auth import get_settings
from postboard.schemas.auth import LoginRequest, LoginResponse, RegisterRequest
from postboard.schemas.common import ErrorResponse, MessageResponse
from postboard.services.auth_service import auth_service

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post(
    "/register",
    status_code=201,
    response_model=MessageResponse,
    responses={
        400: {"description": "Invalid input or user already exists", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create an account",
)
async def register(
    payload: RegisterRequest,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await auth_service.register(db, payload)


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        400: {"description": "Invalid email or password", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Exchange credentials for a bearer token",
)
async def login(
    payload: LoginRequest,
    settings: Settings = Depends(get_settings),
    db: AsyncSession = Depends(get_db_session),
) -> LoginResponse:
    return await auth_service.login(db, payload, settings)
