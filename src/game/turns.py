"""Clue turns with a server-owned deadline."""
import secrets
import time
from typing import Callable, Optional

from src.game.notifier import Notifier
from src.game.votes import VoteScheduler
from src.rooms.models import MAX_CLUE_LENGTH, Message, Player, Room, RoomPhase
from src.rooms.registry import RoomRegistry
from src.logging_config import get_logger

logger = get_logger(__name__)

SKIP_TEXT = "⏭️ Time's up — skipped!"


class TurnScheduler:
    """
    Runs the clue phase: one speaker at a time, in player order.

    A round is complete once it holds as many clues as there are players. After
    the last round the room moves on to voting.
    """

    def __init__(
        self,
        registry: RoomRegistry,
        notifier: Notifier,
        votes: VoteScheduler,
        clock: Callable[[], float] = time.time,
    ):
        self.registry = registry
        self.notifier = notifier
        self.votes = votes
        self.clock = clock

    def _now_ms(self) -> int:
        return int(self.clock() * 1000)

    async def start_turn(self, room: Room) -> None:
        """(Re)start the clue deadline for the current speaker and broadcast."""
        room.vote_deadline = None
        room.turn_deadline = self._now_ms() + room.settings.clue_timeout * 1000
        room.timer.start(room.settings.clue_timeout, self.on_timeout, room, label="turn")
        await self.notifier.broadcast_state(room)

    async def submit_clue(self, room: Room, player_id: str, text: str) -> bool:
        """Accept a clue from the current speaker only. Returns False if ignored."""
        if room.phase != RoomPhase.GAME:
            logger.debug(f"💬 Room {room.code}: clue outside game phase ignored")
            return False

        current = room.current_player
        if current is None or current.id != player_id:
            logger.debug(f"💬 Room {room.code}: out-of-turn clue from {player_id} ignored")
            return False

        text = (text or "").strip()[:MAX_CLUE_LENGTH]
        if not text:
            return False

        room.messages.append(self._message(room, current, text))
        logger.info(f"💬 {current.name} gave a clue in room {room.code} (round {room.round})")
        await self.advance(room)
        return True

    async def on_timeout(self, room: Room) -> None:
        """Skip the current speaker when their deadline elapses."""
        if self.registry.get_room(room.code) is not room or room.phase != RoomPhase.GAME:
            logger.debug(f"⏰ Stale turn timer for room {room.code} dropped")
            return

        skipped = room.current_player
        room.messages.append(self._message(room, skipped, SKIP_TEXT, is_system=True))
        logger.info(f"⏭️ {skipped.name if skipped else 'Player'} was skipped in room {room.code}")
        await self.advance(room)

    async def advance(self, room: Room) -> None:
        """Move to the next speaker, the next round, or the voting phase."""
        room.turn_index = (room.turn_index + 1) % len(room.players)
        await self.resume(room)

    async def resume(self, room: Room) -> None:
        """Close the round if it is complete, otherwise restart the current turn."""
        if room.clue_count(room.round) >= len(room.players):
            if room.round >= room.settings.total_rounds:
                room.timer.cancel()
                room.phase = RoomPhase.VOTING
                room.turn_deadline = None
                room.turn_index = 0
                logger.info(f"🗳️ Room {room.code} moved to VOTING phase")
                await self.votes.continue_or_resolve(room)
                return

            room.round += 1
            room.turn_index = 0
            logger.info(f"🔁 Room {room.code} starting round {room.round}")

        await self.start_turn(room)

    def _message(self, room: Room, player: Optional[Player], text: str, is_system: bool = False) -> Message:
        return Message(
            id=secrets.token_urlsafe(8),
            player_id=None if is_system or player is None else player.id,
            player_name=player.name if player else "Player",
            player_avatar=player.avatar if player else "⏭️",
            text=text,
            round=room.round,
            timestamp=self._now_ms(),
            is_system=is_system,
        )
