"""Handling context for the error filter.

Every transport describes where an error was caught with an ``ArgumentsHost``:
which transport the execution belongs to and, for HTTP, where the response goes.
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Protocol

from fastapi.responses import JSONResponse

from src.shared.context import trace_id_var


class Transport(StrEnum):
    """Channels exposing the application."""

    HTTP = "http"
    GRAPHQL = "graphql"
    WEBSOCKET = "websocket"
    SSE = "sse"


class ResponseSink(Protocol):
    """Writable HTTP response."""

    def status(self, code: int) -> "ResponseSink": ...

    def send(self, body: Any) -> None: ...


class JSONResponseSink:
    """Response sink materialized as a FastAPI ``JSONResponse``."""

    def __init__(self) -> None:
        self._status_code = 200
        self._body: Any = None
        self._sent = False

    def status(self, code: int) -> "JSONResponseSink":
        self._status_code = code
        return self

    def send(self, body: Any) -> None:
        if self._sent:
            raise RuntimeError("Response already sent")
        self._body = body
        self._sent = True

    @property
    def sent(self) -> bool:
        return self._sent

    @property
    def response(self) -> JSONResponse:
        """Response built from the written status and body."""
        if not self._sent:
            raise RuntimeError("Nothing was sent to the response sink")
        return JSONResponse(status_code=self._status_code, content=self._body)


@dataclass(frozen=True)
class ArgumentsHost:
    """Where an error was caught."""

    transport: Transport = Transport.HTTP
    response: ResponseSink | None = None

    def get_type(self) -> Transport:
        return self.transport

    def get_response(self) -> ResponseSink:
        if self.response is None:
            raise RuntimeError(f"No response sink for {self.transport} context")
        return self.response


__all__ = [
    "ArgumentsHost",
    "JSONResponseSink",
    "ResponseSink",
    "Transport",
    "trace_id_var",
]
