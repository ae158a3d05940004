"""
Postboard — Custom Exception Hierarchy
========================================

What:  Application-specific exceptions for every error class the API exposes.
How:   Each exception carries a user-facing message and an optional context
       dict. Global exception handlers (registered in main.py) catch these
       and return the JSON error envelope with the matching status code.
Who:   Raised by services, guards and middleware; caught by global handlers.

Exception Hierarchy:
    PostboardError (base)
    ├── ValidationError          → 400 Bad Request
    ├── ConflictError            → 400 Bad Request (duplicate user/category)
    ├── AuthenticationError      → 401 Unauthorized
    ├── AuthorizationError       → 403 Forbidden
    ├── NotFoundError            → 404 Not Found
    ├── DatabaseError            → 500 Internal Server Error
    └── RequestTimeoutError      → 504 Gateway Timeout
"""

from typing import Any, Dict, Optional


class PostboardError(Exception):
    """
    Base exception for all Postboard application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    status_code = 500
    error_code = "server_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(PostboardError):
    """
    Raised when client input fails validation.

    HTTP: 400 Bad Request. `field` names the first failing field when known.
    """

    status_code = 400
    error_code = "validation_error"

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class ConflictError(PostboardError):
    """Raised when a unique value (user email, category title) is taken."""

    status_code = 400
    error_code = "conflict"


class AuthenticationError(PostboardError):
    """
    Raised when the bearer token is missing, malformed, or expired.

    HTTP: 401 Unauthorized
    """

    status_code = 401
    error_code = "unauthorized"

    def __init__(
        self,
        message: str = "Invalid token, access denied",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AuthorizationError(PostboardError):
    """
    Raised when an authenticated caller lacks rights on the target resource.

    HTTP: 403 Forbidden
    """

    status_code = 403
    error_code = "forbidden"

    def __init__(
        self,
        message: str = "Access denied, forbidden",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(PostboardError):
    """
    Raised when a requested resource does not exist.

    HTTP: 404 Not Found. The message reads "<Resource> not found",
    e.g. NotFoundError("post") → "Post not found".
    """

    status_code = 404
    error_code = "not_found"

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource.capitalize()} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DatabaseError(PostboardError):
    """
    Raised when database operations fail unexpectedly.

    HTTP: 500 Internal Server Error

    The message is the operation-level description ("Error fetching posts").
    Driver details go into `context` and are logged server-side only.
    """

    status_code = 500
    error_code = "server_error"

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RequestTimeoutError(PostboardError):
    """
    Raised when a request exceeds the configured request timeout.

    HTTP: 504 Gateway Timeout
    """

    status_code = 504
    error_code = "timeout"

    def __init__(
        self,
        timeout: float = 30.0,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["timeout"] = timeout
        super().__init__(
            message=f"The request did not complete within {timeout:g} seconds",
            context=ctx,
        )
        self.timeout = timeout
