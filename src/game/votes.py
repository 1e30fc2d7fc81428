"""Sequential voting with a per-slot deadline."""
import time
from typing import Callable

from src.game.notifier import Notifier
from src.game.resolution import resolve
from src.rooms.models import ABSTAIN, Room, RoomPhase
from src.rooms.registry import RoomRegistry
from src.logging_config import get_logger

logger = get_logger(__name__)


class VoteScheduler:
    """
    Runs the voting phase.

    Votes are keyed per voter and may arrive in any order; the schedule only
    decides whose countdown is shown. An elapsed countdown records an abstain for
    the first voter (in player order) who has not voted yet.
    """

    def __init__(
        self,
        registry: RoomRegistry,
        notifier: Notifier,
        clock: Callable[[], float] = time.time,
    ):
        self.registry = registry
        self.notifier = notifier
        self.clock = clock

    def _now_ms(self) -> int:
        return int(self.clock() * 1000)

    async def start(self, room: Room) -> None:
        """Start the countdown for the next pending voter and broadcast."""
        room.timer.cancel()
        room.turn_deadline = None
        pending = room.pending_voter
        if pending is None:
            room.vote_deadline = None
            return

        room.vote_deadline = self._now_ms() + room.settings.vote_timeout * 1000
        room.timer.start(room.settings.vote_timeout, self.on_timeout, room, label="vote")
        logger.debug(f"🗳️ Room {room.code}: waiting for {pending.name}'s vote")
        await self.notifier.broadcast_state(room)

    async def submit(self, room: Room, voter_id: str, target_id: str) -> bool:
        """Record an explicit vote. Returns False when the vote was ignored."""
        if room.phase != RoomPhase.VOTING:
            logger.debug(f"🗳️ Room {room.code}: vote outside voting phase ignored")
            return False

        voter = room.get_player(voter_id)
        if voter is None or voter.is_host or voter_id in room.votes:
            logger.debug(f"🗳️ Room {room.code}: vote from {voter_id} ignored")
            return False

        if target_id != ABSTAIN and room.get_player(target_id) is None:
            logger.debug(f"🗳️ Room {room.code}: vote for unknown target {target_id} ignored")
            return False

        room.timer.cancel()
        self._record(room, voter_id, target_id)
        logger.info(f"🗳️ {voter.name} voted in room {room.code}")
        await self.continue_or_resolve(room)
        return True

    async def on_timeout(self, room: Room) -> None:
        """Force an abstain for the first pending voter."""
        if self.registry.get_room(room.code) is not room or room.phase != RoomPhase.VOTING:
            logger.debug(f"⏰ Stale vote timer for room {room.code} dropped")
            return

        voter = room.pending_voter
        if voter is None:
            return

        self._record(room, voter.id, ABSTAIN)
        logger.info(f"⏰ {voter.name} ran out of time to vote in room {room.code}")
        await self.continue_or_resolve(room)

    async def continue_or_resolve(self, room: Room) -> None:
        if room.pending_voter is None:
            await self.finish(room)
        else:
            room.vote_deadline = None
            await self.start(room)

    async def finish(self, room: Room) -> None:
        """Resolve the vote and move to the result phase."""
        room.timer.cancel()
        room.result = resolve(room)
        room.phase = RoomPhase.RESULT
        room.turn_deadline = None
        room.vote_deadline = None
        logger.info(
            f"🏁 Room {room.code} resolved: {room.result.win.value} win "
            f"(most voted: {room.result.most_voted_id}, tally: {room.result.tally})"
        )
        await self.notifier.broadcast_state(room)

    @staticmethod
    def _record(room: Room, voter_id: str, target_id: str) -> None:
        room.votes[voter_id] = target_id
        player = room.get_player(voter_id)
        if player is not None:
            player.has_voted = True
            player.vote = target_id

    def discard_vote(self, room: Room, player_id: str) -> None:
        """Forget a vote, e.g. when the voter left or became host."""
        room.votes.pop(player_id, None)
        player = room.get_player(player_id)
        if player is not None:
            player.has_voted = False
            player.vote = None
