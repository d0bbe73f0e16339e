"""
Error taxonomy for the StreamHub API.

Every failure a controller raises is one of these; server.py turns them
into the `{statusCode, data, message, success}` envelope. Controllers do
no local recovery, so the message raised is the message the client sees.
"""

from typing import Any, Optional


class ApiError(Exception):
    """Base error carrying an HTTP status and a client-facing message."""

    status_code: int = 500
    kind: str = "Internal"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        errors: Optional[list[Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.errors = errors or []


class ValidationError(ApiError):
    """Missing, empty or malformed input (400)."""

    status_code = 400
    kind = "Validation"


class UnauthorizedError(ApiError):
    """Missing, malformed, expired or rotated-out credential (401)."""

    status_code = 401
    kind = "Unauthorized"


class ForbiddenError(ApiError):
    """Authenticated actor does not own the resource (403)."""

    status_code = 403
    kind = "Forbidden"


class NotFoundError(ApiError):
    """Referenced entity does not exist (404)."""

    status_code = 404
    kind = "NotFound"


class ConflictError(ApiError):
    """Unique field already taken, e.g. username on registration (409)."""

    status_code = 409
    kind = "Conflict"


class InternalError(ApiError):
    """Entity store or blob store failure (500)."""

    status_code = 500
    kind = "Internal"
