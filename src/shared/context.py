"""
Context variables carrying request correlation IDs.

Set by the request middleware, read by the error envelope (``trace_id``)
and by the log patcher (``request_id``).
"""

from contextvars import ContextVar, Token

trace_id_var: ContextVar[str] = ContextVar("trace_id", default="")
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def get_trace_id() -> str:
    """Get current trace ID from context.

    Returns:
        Trace ID string or empty string if not set.
    """
    return trace_id_var.get()


def get_request_id() -> str:
    """Get current request ID from context."""
    return request_id_var.get()


def bind_request_context(request_id: str, trace_id: str | None = None) -> tuple[Token, Token]:
    """Bind correlation IDs for the current request.

    Args:
        request_id: Request ID (from header or generated).
        trace_id: Trace ID, falls back to the request ID.

    Returns:
        Tokens to pass to :func:`reset_request_context`.
    """
    return (
        request_id_var.set(request_id),
        trace_id_var.set(trace_id or request_id),
    )


def reset_request_context(tokens: tuple[Token, Token]) -> None:
    """Restore the context captured by :func:`bind_request_context`."""
    request_token, trace_token = tokens
    request_id_var.reset(request_token)
    trace_id_var.reset(trace_token)
