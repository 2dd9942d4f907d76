"""Shared errors package.

Canonical user friendly errors and their adapters for every transport.
"""

from .base import UserFriendlyError
from .context import ArgumentsHost, JSONResponseSink, ResponseSink, Transport, trace_id_var
from .decorators import gateway_error_wrapper
from .dispatcher import ErrorDispatcher
from .domain import (
    ActionForbidden,
    AlreadyExists,
    AuthenticationRequired,
    BadRequest,
    InternalServerError,
    InvalidInput,
    NotFound,
    TooManyRequest,
)
from .handlers import (
    ExceptionFilterMiddleware,
    GlobalExceptionFilter,
    request_transport,
    setup_exception_handlers,
)
from .mapping import ErrorKind, classify_error, map_any_error
from .schemas import ErrorDetail, ErrorResponse, EventAck, StreamErrorItem
from .streams import catch_sse_errors, map_sse_error, sse_response, to_server_sent_event

__all__ = [
    # Base
    "UserFriendlyError",
    # Catalog
    "InternalServerError",
    "TooManyRequest",
    "BadRequest",
    "AuthenticationRequired",
    "ActionForbidden",
    "NotFound",
    "AlreadyExists",
    "InvalidInput",
    # Mapping
    "ErrorKind",
    "classify_error",
    "map_any_error",
    # Context
    "ArgumentsHost",
    "JSONResponseSink",
    "ResponseSink",
    "Transport",
    "trace_id_var",
    # Transports
    "GlobalExceptionFilter",
    "ExceptionFilterMiddleware",
    "request_transport",
    "setup_exception_handlers",
    "gateway_error_wrapper",
    "map_sse_error",
    "catch_sse_errors",
    "to_server_sent_event",
    "sse_response",
    "ErrorDispatcher",
    # Schemas
    "ErrorDetail",
    "ErrorResponse",
    "EventAck",
    "StreamErrorItem",
]
