"""Application exception hierarchy.

Repositories and services raise these; ``app.main`` maps each type to an
HTTP status once, so routers only catch what they need to reshape.

Usage:
    from app.core.exceptions import NotFoundError

    raise NotFoundError("Course", 42)
"""
from __future__ import annotations
from typing import Any, Optional


class AppError(Exception):
    """Base class. ``status_code`` and ``public_message`` drive the response."""

    status_code = 500
    public_message = "Internal server error"

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.public_message)

    @property
    def message(self) -> str:
        return str(self)


class NotFoundError(AppError):
    """A record with the requested id does not exist.

    Args:
        resource: Human-readable entity name (e.g. "Course").
        resource_id: The id that was looked up.
    """

    status_code = 404

    def __init__(self, resource: str, resource_id: Any = None) -> None:
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource} not found")


class ConflictError(AppError):
    """A create or update would duplicate a unique value."""

    status_code = 400


class AuthenticationRequired(AppError):
    status_code = 401
    public_message = "Authentication required"


class AuthorizationDenied(AppError):
    status_code = 403
    public_message = "Administrator access required"


class UpstreamProviderError(AppError):
    """The text-generation or email collaborator failed.

    ``details`` carries the provider's own message and is returned to the
    client separately from the generic ``message``.
    """

    status_code = 502
    public_message = "Upstream provider error"

    def __init__(self, message: Optional[str] = None, details: Optional[str] = None) -> None:
        self.details = details
        super().__init__(message)


class UpstreamTimeoutError(UpstreamProviderError):
    status_code = 504
    public_message = "Upstream provider timed out"


class StorageError(AppError):
    """Unexpected persistence failure. The message is deliberately generic;
    the original exception is chained and logged server-side."""

    status_code = 500
    public_message = "A storage error occurred"

    def __init__(self, operation: str = "") -> None:
        self.operation = operation
        super().__init__(self.public_message)
