"""
Postboard — Password Hashing & Access Tokens
==============================================

What:  bcrypt password hashing and HS256 JWT issuing/decoding.
Who:   AuthService (register/login), UserService (password change) and the
       verify_token guard.

Token claims:
    id        user id (string UUID)
    is_admin  administrator flag at the time of login
    iat/exp   issue and expiry timestamps
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt

from postboard.config import Settings
from postboard.exceptions import AuthenticationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    """The caller as proven by a verified token."""
    id: uuid.UUID
    is_admin: bool = False


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def create_access_token(identity: Identity, settings: Settings) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "id": str(identity.id),
        "is_admin": identity.is_admin,
        "iat": now,
        "exp": now + timedelta(days=settings.jwt_expires_days),
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: Settings) -> Identity:
    """
    Verify signature and expiry, then return the Identity in the token.

    Raises:
        AuthenticationError: bad signature, expired, or malformed claims
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["exp", "id"]},
        )
        return Identity(
            id=uuid.UUID(str(payload["id"])),
            is_admin=bool(payload.get("is_admin", False)),
        )
    except (jwt.InvalidTokenError, ValueError) as e:
        # Expired tokens included; the reason is logged, not returned
        logger.info("Token rejected: %s", type(e).__name__)
        raise AuthenticationError("Invalid token, access denied")
