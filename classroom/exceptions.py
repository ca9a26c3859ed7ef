"""Domain exceptions translated into JSON error responses by the app factory."""

from __future__ import annotations

from fastapi import status


class ClassroomError(Exception):
    """Base exception for all classroom domain errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "internal_error"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationFailed(ClassroomError):
    """Raised when request input is malformed."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "validation_error"


class UploadRejected(ValidationFailed):
    """Raised when an attachment is oversized or of a disallowed type."""

    code = "upload_rejected"


class Unauthenticated(ClassroomError):
    """Raised when the bearer credential is missing, invalid or expired."""

    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthenticated"


class Forbidden(ClassroomError):
    """Raised on a role, ownership or membership mismatch."""

    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"


class NotFound(ClassroomError):
    """Raised when a referenced entity does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"


class Conflict(ClassroomError):
    """Raised when a uniqueness rule would be violated."""

    status_code = status.HTTP_409_CONFLICT
    code = "conflict"


__all__ = [
    "ClassroomError",
    "ValidationFailed",
    "UploadRejected",
    "Unauthenticated",
    "Forbidden",
    "NotFound",
    "Conflict",
]
