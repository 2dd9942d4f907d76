"""Error dispatcher.

Binds every transport's interception point to one shared metrics handle.
"""

from collections.abc import AsyncIterator, Callable
from typing import Any

from fastapi import FastAPI
from sse_starlette.sse import EventSourceResponse

from src.core.metrics import ErrorMetrics

from .context import ArgumentsHost
from .decorators import gateway_error_wrapper
from .handlers import GlobalExceptionFilter, setup_exception_handlers
from .schemas import StreamErrorItem
from .streams import StreamSource, catch_sse_errors, map_sse_error, sse_response


class ErrorDispatcher:
    """Entry point wiring HTTP, GraphQL, socket and SSE errors to the adapters."""

    def __init__(self, metrics: ErrorMetrics) -> None:
        self.metrics = metrics
        self.exception_filter = GlobalExceptionFilter(metrics)

    def install(self, app: FastAPI) -> None:
        """Register the global exception filter on ``app``."""
        self.exception_filter = setup_exception_handlers(app, self.metrics)

    def catch(self, exception: object, host: ArgumentsHost) -> None:
        self.exception_filter.catch(exception, host)

    def gateway(self, event: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        return gateway_error_wrapper(event, self.metrics)

    def map_sse_error(self, error: Any) -> AsyncIterator[StreamErrorItem]:
        return map_sse_error(error, self.metrics)

    def guard_stream(self, source: StreamSource[Any]) -> AsyncIterator[Any]:
        return catch_sse_errors(source, self.metrics)

    def stream_response(self, source: StreamSource[Any]) -> EventSourceResponse:
        return sse_response(source, self.metrics)
