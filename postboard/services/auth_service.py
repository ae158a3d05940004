"""
Postboard — Auth Service
==========================

What:  Account registration and login.
How:   Registration stores a bcrypt hash; login verifies it and issues a JWT
       whose claims (id, is_admin) become the request Identity on later calls.
Who:   Called by routes/auth.py.
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from postboard.config import Settings
from postboard.exceptions import ConflictError, DatabaseError, PostboardError, ValidationError
from postboard.models.user import User
from postboard.schemas.auth import LoginRequest, LoginResponse, RegisterRequest
from postboard.schemas.common import MessageResponse
from postboard.security import Identity, create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)


class AuthService:

    async def register(self, db: AsyncSession, payload: RegisterRequest) -> MessageResponse:
        """
        Create an account.

        Raises:
            ConflictError: email already registered (→ 400)
        """
        email = payload.email.lower()
        try:
            existing = await db.execute(select(User.id).where(User.email == email))
            if existing.scalar_one_or_none() is not None:
                raise ConflictError("User already exists", context={"field": "email"})

            user = User(
                username=payload.username,
                email=email,
                password=hash_password(payload.password),
            )
            db.add(user)
            await db.flush()
            logger.info("User %s registered", user.id)
            return MessageResponse(message="You registered successfully, please log in")

        except PostboardError:
            raise
        except IntegrityError as e:
            # Lost a race with a concurrent registration of the same email
            raise ConflictError("User already exists", context={"field": "email"}) from e
        except Exception as e:
            logger.error("Error registering user: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Registration failed, please try again.",
                context={"error_type": type(e).__name__},
            ) from e

    async def login(
        self, db: AsyncSession, payload: LoginRequest, settings: Settings
    ) -> LoginResponse:
        """
        Exchange email + password for a bearer token.

        Unknown email and wrong password produce the same 400 message.
        """
        try:
            result = await db.execute(select(User).where(User.email == payload.email.lower()))
            user = result.scalar_one_or_none()
        except Exception as e:
            logger.error("Error loading user for login: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Login failed, please try again.",
                context={"error_type": type(e).__name__},
            ) from e

        if user is None or not verify_password(payload.password, user.password):
            raise ValidationError("Invalid email or password")

        token = create_access_token(Identity(id=user.id, is_admin=user.is_admin), settings)
        logger.info("User %s logged in", user.id)
        return LoginResponse(
            id=user.id,
            username=user.username,
            is_admin=user.is_admin,
            token=token,
        )


auth_service = AuthService()
