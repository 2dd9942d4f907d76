"""WebSocket gateway endpoint"""

from fastapi import APIRouter, WebSocket

from src.core.config import settings

router = APIRouter(tags=["Gateway"])


@router.websocket(settings.gateway.path)
async def socket_gateway(websocket: WebSocket) -> None:
    """Serve gateway events over one WebSocket connection."""
    await websocket.app.state.socket_gateway.serve(websocket)
