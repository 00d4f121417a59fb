import logging
from fastapi import WebSocket, WebSocketDisconnect, APIRouter
from typing import Dict, List, Iterable
from models.user import UserRole

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/notifications", tags=["notifications"])

class ConnectionManager:
    def __init__(self):
        self.active_connections: Dict[str, List[WebSocket]] = {}  # role -> sockets

    async def connect(self, websocket: WebSocket, channel: str):
        await websocket.accept()
        self.active_connections.setdefault(channel, []).append(websocket)
        logger.debug(f"WebSocket connected to {channel}. Total connections: {len(self.active_connections[channel])}")

    def disconnect(self, websocket: WebSocket, channel: str):
        if channel in self.active_connections:
            if websocket in self.active_connections[channel]:
                self.active_connections[channel].remove(websocket)
            if not self.active_connections[channel]:
                del self.active_connections[channel]
            logger.debug(f"WebSocket disconnected from {channel}. Total connections: {len(self.active_connections.get(channel, []))}")

    async def broadcast(self, message: dict, channel: str):
        for connection in list(self.active_connections.get(channel, [])):
            try:
                await connection.send_json(message)
            except Exception as e:
                logger.warning(f"Failed to send WebSocket message to {channel}: {str(e)}")

connection_manager = ConnectionManager()

async def notify_staff(event: str, data: dict, roles: Iterable[UserRole] = (UserRole.ADMIN,)):
    """Push a dashboard refresh event; delivery problems never fail the caller."""
    message = {"event": event, **data}
    for role in roles:
        logger.debug(f"Sending {event} to {role.value}: {data}")
        try:
            await connection_manager.broadcast(message, role.value)
        except Exception as e:
            logger.warning(f"Failed to broadcast {event} to {role.value}: {str(e)}")

async def notify_order_event(event: str, order_id: int, status: str = None):
    await notify_staff(event, {"order_id": order_id, "status": status})

async def notify_recap_event(event: str, recap_id: int, status: str = None):
    await notify_staff(event, {"recap_id": recap_id, "status": status}, roles=(UserRole.ADMIN, UserRole.MANAGER))

@router.websocket("/ws/{role}")
async def websocket_notifications(websocket: WebSocket, role: str):
    if role not in {r.value for r in UserRole}:
        await websocket.close(code=4000, reason="Invalid channel")
        return

    try:
        await connection_manager.connect(websocket, role)
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        connection_manager.disconnect(websocket, role)
    except Exception as e:
        logger.error(f"WebSocket error on {role}: {str(e)}")
        connection_manager.disconnect(websocket, role)
        await websocket.close(code=4000, reason=str(e))
