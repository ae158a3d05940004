"""
Postboard — Authentication & Authorization Guards
===================================================

What:  FastAPI dependencies that verify the bearer token and enforce who may
       act on a resource.
How:   verify_token decodes `Authorization: Bearer <jwt>` into an Identity,
       stores it on request.state.identity and returns it. The require_*
       guards build on verify_token (and validate_object_id where the rule
       compares against the path id).

Guards:
    verify_token                 any authenticated caller          401
    require_admin                administrators only               403
    require_self                 caller's id == path id            403
    require_self_or_admin        caller's id == path id, or admin  403

Ownership of posts and comments is checked in the services, because the
owner is only known after the resource has been loaded.
"""

import logging
import uuid
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from postboard.config import Settings
from postboard.exceptions import AuthenticationError, AuthorizationError
from postboard.middleware.validate_id import validate_object_id
from postboard.security import Identity, decode_access_token

logger = logging.getLogger(__name__)

_bearer = HTTPBearer(auto_error=False, description="JWT issued by /api/auth/login")


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


async def verify_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
    settings: Settings = Depends(get_settings),
) -> Identity:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("No token provided, access denied")

    identity = decode_access_token(credentials.credentials, settings)
    request.state.identity = identity
    return identity


async def require_admin(identity: Identity = Depends(verify_token)) -> Identity:
    if not identity.is_admin:
        logger.info("Admin-only route refused for user %s", identity.id)
        raise AuthorizationError("Not allowed, only admin")
    return identity


async def require_self(
    target_id: uuid.UUID = Depends(validate_object_id),
    identity: Identity = Depends(verify_token),
) -> Identity:
    if identity.id != target_id:
        raise AuthorizationError("Not allowed, only the user themself")
    return identity


async def require_self_or_admin(
    target_id: uuid.UUID = Depends(validate_object_id),
    identity: Identity = Depends(verify_token),
) -> Identity:
    if not (identity.is_admin or identity.id == target_id):
        raise AuthorizationError("Not allowed, only the user themself or admin")
    return identity
