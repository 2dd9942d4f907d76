"""WebSocket event gateway."""

from .events import register_system_events
from .gateway import INVALID_FRAME_EVENT, SocketClient, SocketFrame, SocketGateway

__all__ = [
    "INVALID_FRAME_EVENT",
    "SocketClient",
    "SocketFrame",
    "SocketGateway",
    "register_system_events",
]
