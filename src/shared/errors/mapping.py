"""Mapping of arbitrary errors to user friendly errors.

Single classification point used by every transport adapter.
"""

from enum import StrEnum
from typing import Any

from src.core.rate_limit import ThrottlerError

from .base import UserFriendlyError
from .domain import InternalServerError, TooManyRequest


class ErrorKind(StrEnum):
    """Outcome of classifying a raised value."""

    PASS_THROUGH = "pass_through"
    RATE_LIMITED = "rate_limited"
    INTERNAL = "internal"


def classify_error(error: Any) -> ErrorKind:
    """Decide which canonical kind ``error`` belongs to. First match wins."""
    if isinstance(error, UserFriendlyError):
        return ErrorKind.PASS_THROUGH
    if isinstance(error, ThrottlerError):
        return ErrorKind.RATE_LIMITED
    return ErrorKind.INTERNAL


def map_any_error(error: Any) -> UserFriendlyError:
    """Map any raised value to a user friendly error.

    Never raises. Canonical errors are returned as is, throttle rejections
    become ``TooManyRequest`` and everything else becomes an
    ``InternalServerError`` keeping the original value as ``cause``.

    Args:
        error: Anything that was raised or reported as an error.

    Returns:
        The canonical error to surface.
    """
    kind = classify_error(error)

    if kind is ErrorKind.PASS_THROUGH:
        return error
    if kind is ErrorKind.RATE_LIMITED:
        return TooManyRequest(retry_after=error.retry_after)

    mapped = InternalServerError()
    mapped.cause = error
    return mapped
