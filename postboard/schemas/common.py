"""
Postboard — Shared Response Schemas
=====================================

Error envelope, plain message responses and the health payload.
"""

from typing import Optional

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    message: str = Field(description="Human-readable result")


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "validation_error",
            "message": "\\"title\\" length must be at least 3 characters long",
            "details": {"field": "title"},
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
