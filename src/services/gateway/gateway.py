"""WebSocket event gateway.

Routes JSON frames ``{"event": ..., "data": ..., "id": ...}`` to registered
event handlers and answers every frame with ``{"event", "id", "data"}``.
Handlers are wrapped with the gateway error wrapper at registration, so a
failing handler answers with ``{"error": ...}`` and the socket stays open.
"""

import inspect
from collections.abc import Callable
from dataclasses import dataclass, field
from functools import wraps
from typing import Any

from fastapi import WebSocket, WebSocketDisconnect
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel, ValidationError

from src.core.rate_limit import RedisRateLimiter
from src.shared.errors import BadRequest, ErrorDispatcher, NotFound
from src.shared.logging import get_logger

logger = get_logger(__name__)

INVALID_FRAME_EVENT = "invalid_frame"

EventHandler = Callable[["SocketClient", Any], Any]


class SocketFrame(BaseModel):
    """Incoming gateway frame."""

    event: str
    data: Any = None
    id: str | int | None = None


@dataclass
class SocketClient:
    """Connected socket client passed to every handler."""

    id: str
    websocket: WebSocket | None = None
    state: dict[str, Any] = field(default_factory=dict)


class SocketGateway:
    """Registry and receive loop for socket events."""

    def __init__(self, dispatcher: ErrorDispatcher) -> None:
        self._dispatcher = dispatcher
        self._handlers: dict[str, EventHandler] = {}

    @property
    def events(self) -> list[str]:
        return sorted(self._handlers)

    def on(
        self,
        event: str,
        *,
        limiter: RedisRateLimiter | None = None,
    ) -> Callable[[EventHandler], EventHandler]:
        """Register a handler for ``event``.

        Args:
            event: Event name.
            limiter: Optional rate limiter keyed by client id.

        Returns:
            Decorator returning the wrapped handler.
        """

        def decorator(func: EventHandler) -> EventHandler:
            if event in self._handlers:
                raise ValueError(f"Handler for event {event!r} is already registered")

            handler = func if limiter is None else _throttled(func, limiter)
            wrapped = self._dispatcher.gateway(event)(handler)
            self._handlers[event] = wrapped
            return wrapped

        return decorator

    async def dispatch(self, event: str, data: Any, client: SocketClient) -> Any:
        """Run the handler of ``event`` and return its acknowledgement."""
        handler = self._handlers.get(event)

        if handler is None:

            async def unknown_event(client: SocketClient, data: Any) -> Any:
                raise NotFound(
                    f"Unknown event: {event}",
                    data={"resource_type": "event", "resource_id": event},
                )

            handler = self._dispatcher.gateway(event)(unknown_event)

        result = handler(client, data)
        if inspect.isawaitable(result):
            result = await result
        return result

    async def handle_message(self, raw: str | bytes, client: SocketClient) -> dict[str, Any]:
        """Decode one frame, dispatch it and build the reply frame.

        Only JSON text frames are accepted. Binary frames get the same
        ``invalid_frame`` reply as malformed JSON.
        """
        if isinstance(raw, bytes):
            errors = [{"type": "binary_frame", "loc": (), "msg": "Binary frames are not supported"}]
            ack = await self._reject_frame(client, errors)
            return {"event": INVALID_FRAME_EVENT, "id": None, "data": ack}

        try:
            frame = SocketFrame.model_validate_json(raw)
        except ValidationError as e:
            errors = e.errors(include_url=False, include_context=False, include_input=False)
            ack = await self._reject_frame(client, errors)
            return {"event": INVALID_FRAME_EVENT, "id": None, "data": ack}

        ack = await self.dispatch(frame.event, frame.data, client)
        return {"event": frame.event, "id": frame.id, "data": ack}

    async def serve(self, websocket: WebSocket) -> None:
        """Receive loop for one connection."""
        await websocket.accept()
        client = SocketClient(
            id=websocket.scope.get("state", {}).get("request_id") or str(id(websocket)),
            websocket=websocket,
        )
        logger.info("Socket client connected", client_id=client.id)

        try:
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    break

                raw = message.get("text")
                if raw is None:
                    raw = message.get("bytes") or b""

                reply = await self.handle_message(raw, client)
                await websocket.send_json(jsonable_encoder(reply))
        except WebSocketDisconnect:
            # client left while a reply was being sent
            pass

        logger.info("Socket client disconnected", client_id=client.id)

    async def _reject_frame(self, client: SocketClient, errors: list[dict[str, Any]]) -> Any:
        @self._dispatcher.gateway(INVALID_FRAME_EVENT)
        def invalid_frame(client: SocketClient, data: Any) -> Any:
            raise BadRequest("Malformed gateway frame", data={"errors": data})

        return invalid_frame(client, errors)


def _throttled(func: EventHandler, limiter: RedisRateLimiter) -> EventHandler:
    @wraps(func)
    async def throttled(client: SocketClient, data: Any) -> Any:
        await limiter.check(client.id)
        result = func(client, data)
        if inspect.isawaitable(result):
            result = await result
        return result

    return throttled
