"""Server-sent event error handling.

A failing producer ends its stream with one typed error item instead of
breaking the connection.
"""

import json
from collections.abc import AsyncIterable, AsyncIterator, Callable
from typing import Any, TypeVar, Union

from sse_starlette.sse import EventSourceResponse

from src.core.metrics import ErrorMetrics

from .mapping import map_any_error
from .schemas import StreamErrorItem

T = TypeVar("T")

StreamSource = Union[AsyncIterable[T], Callable[[], AsyncIterable[T]]]


def map_sse_error(error: Any, metrics: ErrorMetrics) -> AsyncIterator[StreamErrorItem]:
    """Map an error to the terminal item of a stream.

    The error is logged and counted when this is called, whether or not the
    returned stream is ever read.

    Args:
        error: Error raised while building or consuming the stream.
        metrics: Error counters to record into.

    Returns:
        Async iterator yielding exactly one ``{"type": "error", "data": <error json>}`` item.
    """
    mapped = map_any_error(error)
    mapped.log("Sse")
    metrics.sse.counter("error").add(1, {"status": mapped.status})
    item: StreamErrorItem = {"type": "error", "data": mapped.to_json()}

    async def single_item() -> AsyncIterator[StreamErrorItem]:
        yield item

    return single_item()


async def catch_sse_errors(
    source: StreamSource[T],
    metrics: ErrorMetrics,
) -> AsyncIterator[T | StreamErrorItem]:
    """Re-yield ``source`` and end it with an error item if it fails.

    ``source`` may be the stream itself or a zero-argument factory, in which
    case errors raised while building the stream are handled as well.
    """
    failure: Exception | None = None
    try:
        stream = source() if callable(source) else source
        async for item in stream:
            yield item
    except Exception as e:
        failure = e

    if failure is not None:
        async for item in map_sse_error(failure, metrics):
            yield item


def to_server_sent_event(item: Any) -> dict[str, str]:
    """Render one stream item as an ``EventSourceResponse`` event."""
    if isinstance(item, str):
        return {"data": item}

    if isinstance(item, dict) and "type" in item and "data" in item:
        return {
            "event": str(item["type"]),
            "data": json.dumps(item["data"], ensure_ascii=False, default=str),
        }

    return {"data": json.dumps(item, ensure_ascii=False, default=str)}


def sse_response(source: StreamSource[Any], metrics: ErrorMetrics) -> EventSourceResponse:
    """Stream ``source`` as server-sent events with errors mapped to an error event."""

    async def event_generator() -> AsyncIterator[dict[str, str]]:
        async for item in catch_sse_errors(source, metrics):
            yield to_server_sent_event(item)

    return EventSourceResponse(event_generator())
