"""Global exception filter.

One catch-all interception point for HTTP requests. GraphQL executions share
the same registration and are recognized by the handling context: their errors
are re-raised for the GraphQL logger plugin, which owns the response envelope.
"""

from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.responses import Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from src.core.metrics import ErrorMetrics
from src.core.rate_limit import ThrottlerError
from src.shared.context import bind_request_context, reset_request_context

from .base import UserFriendlyError
from .context import ArgumentsHost, JSONResponseSink, Transport
from .mapping import map_any_error

ExceptionHandler = Callable[[Request, Exception], Awaitable[Response]]


class GlobalExceptionFilter:
    """Turns any error caught during request handling into an HTTP response."""

    def __init__(self, metrics: ErrorMetrics) -> None:
        self.metrics = metrics

    def catch(self, exception: object, host: ArgumentsHost) -> None:
        """Handle ``exception`` caught in ``host``.

        Raises:
            UserFriendlyError: For GraphQL executions, unchanged and unrecorded.
        """
        error = map_any_error(exception)

        if host.get_type() is Transport.GRAPHQL:
            raise error

        error.log("HTTP")
        self.metrics.controllers.counter("error").add(1, {"status": error.status})
        host.get_response().status(error.status).send(error.to_json())


class ExceptionFilterMiddleware:
    """Handles unexpected exceptions inside the application.

    ``Exception`` handlers registered on the app run in Starlette's
    ``ServerErrorMiddleware``, which re-raises to the server after responding.
    Errors caught here end with the filter's response.
    """

    def __init__(self, app: ASGIApp, handler: ExceptionHandler) -> None:
        self.app = app
        self.handler = handler

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_wrapper(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception as exc:
            # Nothing can be written once the response has started
            if response_started:
                raise
            response = await self.handler(Request(scope, receive), exc)
            await response(scope, receive, send)


def request_transport(request: Request) -> Transport:
    """Transport the request is executed for, HTTP unless marked otherwise."""
    return getattr(request.state, "transport", Transport.HTTP)


def setup_exception_handlers(app: FastAPI, metrics: ErrorMetrics) -> GlobalExceptionFilter:
    """Register the global exception filter on a FastAPI application.

    Registers one handler for:
    - User friendly errors (UserFriendlyError)
    - Rate limit rejections (ThrottlerError)
    - Unexpected exceptions (Exception), through ``ExceptionFilterMiddleware``

    Starlette's own HTTPException and request validation handlers are kept.
    The middleware is added at call time, so calling this before other
    middleware places it innermost.

    Args:
        app: FastAPI application instance
        metrics: Error counters the filter records into

    Returns:
        The registered filter.
    """
    exception_filter = GlobalExceptionFilter(metrics)

    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        # Outside the request middleware the context must be bound again
        request_id = getattr(request.state, "request_id", None)
        tokens = bind_request_context(request_id) if request_id else None
        try:
            sink = JSONResponseSink()
            exception_filter.catch(exc, ArgumentsHost(request_transport(request), sink))
            return sink.response
        finally:
            if tokens is not None:
                reset_request_context(tokens)

    for exc_class in (UserFriendlyError, ThrottlerError, Exception):
        app.add_exception_handler(exc_class, global_exception_handler)
    app.add_middleware(ExceptionFilterMiddleware, handler=global_exception_handler)

    return exception_filter
