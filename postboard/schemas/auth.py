"""
Postboard — Auth Schemas
==========================

Register and login payloads, and the login response carrying the token.
"""

import uuid

from pydantic import BaseModel, Field

from postboard.schemas.validation import StrictPayload


class RegisterRequest(StrictPayload):
    username: str = Field(min_length=2, max_length=100)
    email: str = Field(min_length=5, max_length=100, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    password: str = Field(min_length=8, max_length=128)


class LoginRequest(StrictPayload):
    email: str = Field(min_length=5, max_length=100)
    password: str = Field(min_length=1, max_length=128)


class LoginResponse(BaseModel):
    id: uuid.UUID
    username: str
    is_admin: bool
    token: str = Field(description="Bearer token for the Authorization header")
