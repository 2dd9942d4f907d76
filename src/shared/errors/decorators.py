"""Decorators for error handling.

Socket gateway handlers must never raise: a raised error tears down the
connection, while an error shaped acknowledgement is delivered like any
other result.
"""

from collections.abc import Callable
from functools import wraps
from inspect import iscoroutinefunction
from typing import Any, ParamSpec, TypeVar

from src.core.metrics import ErrorMetrics

from .mapping import map_any_error
from .schemas import EventAck

P = ParamSpec("P")
T = TypeVar("T")


def gateway_error_wrapper(
    event: str,
    metrics: ErrorMetrics,
) -> Callable[[Callable[P, T]], Callable[P, T | EventAck]]:
    """Decorator returning an error acknowledgement instead of raising.

    Usage:
        @gateway_error_wrapper("doc:update", metrics)
        async def on_update(client_id: str, payload: dict) -> dict:
            ...

    The decorator:
    - Returns the handler result unchanged on success
    - Maps any exception to a user friendly error, logs it and counts it
      under ``event``
    - Returns ``{"error": <error json>}`` as the acknowledgement
    - Works with both sync and async handlers

    Args:
        event: Event name the handler is registered for
        metrics: Error counters to record into
    """

    def _handle_exception(e: Exception) -> EventAck:
        error = map_any_error(e)
        error.log("Websocket")
        metrics.socketio.counter("error").add(1, {"event": event, "status": error.status})
        return {"error": error.to_json()}

    def decorator(func: Callable[P, T]) -> Callable[P, T | EventAck]:
        if iscoroutinefunction(func):

            @wraps(func)
            async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> Any:
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    return _handle_exception(e)

            return async_wrapper  # type: ignore[return-value]

        @wraps(func)
        def sync_wrapper(*args: P.args, **kwargs: P.kwargs) -> Any:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                return _handle_exception(e)

        return sync_wrapper

    return decorator
