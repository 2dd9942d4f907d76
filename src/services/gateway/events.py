"""Built-in gateway events."""

from datetime import UTC, datetime
from typing import Any

from .gateway import SocketClient, SocketGateway


def register_system_events(gateway: SocketGateway) -> None:
    """Register the events every gateway answers."""

    @gateway.on("ping")
    async def ping(client: SocketClient, data: Any) -> dict[str, Any]:
        return {"pong": datetime.now(UTC).isoformat(), "client_id": client.id}

    @gateway.on("events")
    def list_events(client: SocketClient, data: Any) -> list[str]:
        return gateway.events
