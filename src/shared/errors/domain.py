"""Standard user friendly error types.

Catalog of canonical errors shared by every transport.
"""

from typing import Any

from .base import UserFriendlyError


class InternalServerError(UserFriendlyError):
    """An internal error occurred."""

    status = 500
    type = "INTERNAL_SERVER_ERROR"


class TooManyRequest(UserFriendlyError):
    """Too many requests."""

    status = 429
    type = "TOO_MANY_REQUESTS"

    def __init__(self, message: str | None = None, retry_after: int | None = None) -> None:
        data: dict[str, Any] | None = None
        if retry_after is not None:
            data = {"retry_after": retry_after}
        super().__init__(message=message, data=data)


class BadRequest(UserFriendlyError):
    """Bad request."""

    status = 400
    type = "BAD_REQUEST"


class AuthenticationRequired(UserFriendlyError):
    """You must sign in first to access this resource."""

    status = 401
    type = "AUTHENTICATION_REQUIRED"


class ActionForbidden(UserFriendlyError):
    """You do not have permission to perform this action."""

    status = 403
    type = "ACTION_FORBIDDEN"


class NotFound(UserFriendlyError):
    """Resource not found."""

    status = 404
    type = "RESOURCE_NOT_FOUND"


class AlreadyExists(UserFriendlyError):
    """Resource already exists."""

    status = 409
    type = "RESOURCE_ALREADY_EXISTS"


class InvalidInput(UserFriendlyError):
    """Invalid input."""

    status = 422
    type = "INVALID_INPUT"
