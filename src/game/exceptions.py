"""Errors reported back to the client that sent the intent."""
from typing import Optional


class GameError(Exception):
    """Base class for failures the caller is told about."""

    message = "Request rejected"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class RoomNotFound(GameError):
    message = "Room not found"


class GameInProgress(GameError):
    message = "Game already in progress"


class InvalidName(GameError):
    message = "Name must be 1-20 characters"


class AlreadyInRoom(GameError):
    message = "Already in a room"
