"""REST endpoints for room lookup."""
from typing import Optional

from fastapi import APIRouter, HTTPException, Request, status

from src.game.logic import JOINABLE_PHASES
from src.rooms.models import CamelModel
from src.rooms.registry import RoomRegistry

router = APIRouter(prefix="/rooms", tags=["rooms"])


class RoomResponse(CamelModel):
    """Room information response."""
    code: str
    phase: str
    player_count: int
    host_name: Optional[str] = None
    joinable: bool


def get_registry(request: Request) -> RoomRegistry:
    return request.app.state.registry


@router.get("/{code}", response_model=RoomResponse, response_model_by_alias=True)
async def get_room(code: str, request: Request):
    """Check a room code before joining it."""
    room = get_registry(request).get_room(code)
    if room is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Room not found")

    host = room.get_player(room.host_id)
    return RoomResponse(
        code=room.code,
        phase=room.phase.value,
        player_count=len(room.players),
        host_name=host.name if host else None,
        joinable=room.phase in JOINABLE_PHASES,
    )
