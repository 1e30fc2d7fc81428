"""Notifier backed by the Socket.IO server."""
from typing import Any, Dict

from src.rooms.models import Room
from src.logging_config import get_logger

logger = get_logger(__name__)


class SocketNotifier:
    """Room broadcasts go to the room code channel, unicasts to the sid channel."""

    def __init__(self, sio):
        self.sio = sio

    async def broadcast_state(self, room: Room) -> None:
        logger.debug(f"📤 Broadcasting gameState to room {room.code}: {len(room.players)} players, phase={room.phase.value}")
        await self.sio.emit('gameState', room.snapshot(), room=room.code)

    async def send(self, conn_id: str, event: str, payload: Dict[str, Any]) -> None:
        await self.sio.emit(event, payload, room=conn_id)

    async def error(self, conn_id: str, message: str) -> None:
        await self.sio.emit('error', {'message': message}, room=conn_id)
