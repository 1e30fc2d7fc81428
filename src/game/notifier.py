"""Outbound capability the game logic uses to reach clients."""
from typing import Any, Dict, Protocol

from src.rooms.models import Room


class Notifier(Protocol):
    async def broadcast_state(self, room: Room) -> None:
        """Send the room snapshot to every member."""

    async def send(self, conn_id: str, event: str, payload: Dict[str, Any]) -> None:
        """Send one event to a single connection."""

    async def error(self, conn_id: str, message: str) -> None:
        """Tell a single connection its request failed."""
