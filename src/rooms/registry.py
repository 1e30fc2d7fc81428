"""In-memory room registry."""
import secrets
import string
from typing import Callable, Dict, List, Optional

from src.rooms.models import Room
from src.logging_config import get_logger

logger = get_logger(__name__)


class RoomRegistry:
    """
    Maps room codes to live rooms.

    Every mutation runs on the event loop thread, so no locking is needed.
    """

    CODE_ALPHABET = string.ascii_uppercase
    MAX_CODE_ATTEMPTS = 100

    def __init__(self, code_length: int = 4, code_factory: Optional[Callable[[], str]] = None):
        self.code_length = code_length
        self._code_factory = code_factory or self._random_code
        self._rooms: Dict[str, Room] = {}
        # player id -> room code
        self._seats: Dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._rooms)

    def __contains__(self, code: str) -> bool:
        return self.normalize(code) in self._rooms

    @staticmethod
    def normalize(code: Optional[str]) -> str:
        return (code or "").strip().upper()

    def _random_code(self) -> str:
        return "".join(secrets.choice(self.CODE_ALPHABET) for _ in range(self.code_length))

    def _generate_code(self) -> str:
        """Generate a code no live room uses."""
        for _ in range(self.MAX_CODE_ATTEMPTS):
            code = self.normalize(self._code_factory())
            if code and code not in self._rooms:
                return code
        raise RuntimeError("Could not generate a free room code")

    def create_room(self, host_id: str) -> Room:
        """Create an empty room that the given connection will host."""
        code = self._generate_code()
        room = Room(code=code, host_id=host_id)
        self._rooms[code] = room
        logger.info(f"🏠 Room {code} created by {host_id}")
        return room

    def get_room(self, code: Optional[str]) -> Optional[Room]:
        """Get room by code (case-insensitive)."""
        return self._rooms.get(self.normalize(code))

    def seat(self, player_id: str, room: Room) -> None:
        """Record which room a player sits in."""
        self._seats[player_id] = room.code

    def unseat(self, player_id: str) -> None:
        self._seats.pop(player_id, None)

    def find_room_of(self, player_id: str) -> Optional[Room]:
        code = self._seats.get(player_id)
        return self._rooms.get(code) if code else None

    def delete_room(self, code: str) -> None:
        room = self._rooms.pop(self.normalize(code), None)
        if room is not None:
            for player in room.players:
                self._seats.pop(player.id, None)
            room.timer.cancel()
            logger.info(f"🗑️ Room {room.code} deleted")

    def rooms(self) -> List[Room]:
        return list(self._rooms.values())

    def close(self) -> None:
        """Cancel every room timer and forget all rooms."""
        for room in self._rooms.values():
            room.timer.cancel()
        count = len(self._rooms)
        self._rooms.clear()
        self._seats.clear()
        logger.info(f"🧹 Room registry closed ({count} rooms dropped)")
