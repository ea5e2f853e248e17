"""
Inkpress Backend - Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions, one per failure category.
How:   Each exception carries a user-facing message and an optional context
       dict. Global handlers (registered in main.py) turn them into JSON error
       responses with the matching HTTP status code.
Who:   Raised by services and dependencies; caught by the global handlers.

Exception Hierarchy:
    InkpressError (base)
    ├── ValidationError          → 400 Bad Request
    │   └── MissingFileError     → 400 Bad Request
    ├── AuthorizationError       → 400 Bad Request (requester is not the author)
    ├── AuthenticationError      → 401 Unauthorized
    │   ├── MissingTokenError    → 401 Unauthorized
    │   └── InvalidTokenError    → 401 Unauthorized
    ├── NotFoundError            → 404 Not Found
    ├── FileStorageError         → 500 Internal Server Error
    ├── TokenSigningError        → 500 Internal Server Error
    └── DatabaseError            → 500 Internal Server Error

Every failure path raises one of these (or is caught by the catch-all
handler), so no error leaves a request without a response.
"""

from typing import Any, Dict, Optional


class InkpressError(Exception):
    """
    Base exception for all Inkpress application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned for 5xx errors)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(InkpressError):
    """
    Raised when client input fails validation.

    When:    Missing username/password, taken username, unknown user at login,
             wrong password, oversized upload.
    HTTP:    400 Bad Request
    """

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


class MissingFileError(ValidationError):
    """Raised when a request that requires an upload carries no file or filename."""

    def __init__(self, message: str = "File or originalname is missing"):
        super().__init__(message=message, field="file")


class AuthorizationError(InkpressError):
    """
    Raised when an authenticated user edits a post they did not write.

    HTTP:    400 Bad Request (the API contract predates a 403 response)
    """

    def __init__(
        self,
        message: str = "You are not the author",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AuthenticationError(InkpressError):
    """Base for session token failures. HTTP: 401 Unauthorized."""


class MissingTokenError(AuthenticationError):
    """The session cookie is absent or empty."""

    def __init__(self, message: str = "Unauthorized: Token missing"):
        super().__init__(message=message)


class InvalidTokenError(AuthenticationError):
    """The session token failed signature/format checks or lacks identity claims."""

    def __init__(
        self,
        message: str = "Unauthorized: Invalid token",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(InkpressError):
    """
    Raised when a requested resource does not exist.

    When:    PUT /post with an unknown post id.
    HTTP:    404 Not Found
    """

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


class FileStorageError(InkpressError):
    """
    Raised when file system operations fail.

    When:    Disk full, permission denied, upload directory not writable.
    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "File storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class TokenSigningError(InkpressError):
    """Raised when a session token cannot be produced. HTTP: 500."""

    def __init__(
        self,
        message: str = "Could not create a session. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(InkpressError):
    """
    Raised when database operations fail unexpectedly.

    HTTP:    500 Internal Server Error
    The client always receives a generic message; details are logged server-side.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
