"""Connection gateway: binds Socket.IO sessions to game rooms."""
from typing import Dict, Optional

from src.game.logic import GameService
from src.rooms.models import Room
from src.sockets.connection_events import register_connection_events
from src.sockets.game_events import register_game_events
from src.sockets.notifier import SocketNotifier
from src.sockets.room_events import register_room_events
from src.logging_config import get_logger

logger = get_logger(__name__)


class ConnectionGateway:
    """
    Owns the sid -> room session table and registers the intent handlers.

    The sid is the player id, so the game logic never sees transport details.
    """

    def __init__(self, sio, game: GameService, notifier: SocketNotifier):
        self.sio = sio
        self.game = game
        self.notifier = notifier
        # sid -> {room_code, name}
        self.sessions: Dict[str, dict] = {}

    def register(self) -> None:
        register_connection_events(self.sio, self)
        register_room_events(self.sio, self)
        register_game_events(self.sio, self)
        logger.info("✅ Socket.IO event handlers registered!")

    def is_connected(self, sid: str) -> bool:
        """False once the client has hung up, even while its disconnect is being handled."""
        return self.sio.manager.is_connected(sid, '/')

    def room_code(self, sid: str) -> Optional[str]:
        session = self.sessions.get(sid)
        return session.get('room_code') if session else None

    async def attach(self, sid: str, room: Room) -> None:
        """Join the room channel before anything is broadcast to it."""
        await self.sio.enter_room(sid, room.code)
        player = room.get_player(sid)
        self.sessions[sid] = {
            'room_code': room.code,
            'name': player.name if player else None,
        }

    def detach(self, sid: str) -> Optional[dict]:
        return self.sessions.pop(sid, None)
