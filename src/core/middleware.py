"""
Request middleware.
"""

import uuid

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.datastructures import Headers, MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from src.shared.context import bind_request_context, reset_request_context

from .config import settings

REQUEST_ID_HEADER = "X-Request-ID"


class RequestContextMiddleware:
    """Binds a request ID to every HTTP request and WebSocket connection.

    The ID comes from ``X-Request-ID`` / ``X-Correlation-ID`` or is generated,
    is stored in ``scope["state"]`` and the context variables, and is echoed
    in the ``X-Request-ID`` response header.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] not in ("http", "websocket"):
            await self.app(scope, receive, send)
            return

        headers = Headers(scope=scope)
        request_id = (
            headers.get(REQUEST_ID_HEADER)
            or headers.get("X-Correlation-ID")
            or str(uuid.uuid4())
        )
        scope.setdefault("state", {})["request_id"] = request_id

        async def send_with_request_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                MutableHeaders(scope=message)[REQUEST_ID_HEADER] = request_id
            await send(message)

        tokens = bind_request_context(request_id)
        try:
            await self.app(scope, receive, send_with_request_id)
        finally:
            reset_request_context(tokens)


def setup_middleware(app: FastAPI) -> None:
    """Configure application middleware.

    Args:
        app: FastAPI application.
    """
    # Last added runs first
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.app.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestContextMiddleware)
