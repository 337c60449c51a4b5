"""Exception hierarchy for the storage core and its HTTP mapping."""

from __future__ import annotations

from typing import Any, Optional


class CloudboxError(Exception):
    """
    Base exception for cloudbox.

    Attributes:
        details: Optional structured information merged into the error body.
        status_code: HTTP status the route layer answers with.
    """

    status_code = 500

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class NotFoundError(CloudboxError):
    """Raised when an entity id (or share token) does not resolve."""

    status_code = 404


class ForbiddenError(CloudboxError):
    """Raised when the entity exists but the caller does not own it."""

    status_code = 403


class GoneError(CloudboxError):
    """Raised when a share link has expired."""

    status_code = 410


class PasswordRequiredError(CloudboxError):
    """Raised when a password-protected share is opened without a password."""

    status_code = 401

    def __init__(self, message: str = "Password required", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.details.setdefault("passwordRequired", True)


class UnauthorizedError(CloudboxError):
    """Raised when a share password does not match."""

    status_code = 401


class ValidationFailedError(CloudboxError):
    """Raised on malformed input or a disallowed state transition."""

    status_code = 400


class CorruptHierarchyError(CloudboxError):
    """Raised when a cycle is found in a folder parent chain."""

    status_code = 500


class StorageExceededError(CloudboxError):
    """Raised when an upload would exceed the user's storage limit."""

    status_code = 413


def error_payload(exc: CloudboxError) -> dict[str, Any]:
    """JSON body for an error response."""
    return {"message": exc.message, **exc.details}
