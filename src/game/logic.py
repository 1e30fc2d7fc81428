"""Room state machine for the imposter game."""
import random
import time
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError

from src.game.exceptions import AlreadyInRoom, GameInProgress, InvalidName, RoomNotFound
from src.game.notifier import Notifier
from src.game.turns import TurnScheduler
from src.game.votes import VoteScheduler
from src.rooms.models import (
    AVATARS,
    MAX_NAME_LENGTH,
    MAX_TOPIC_LENGTH,
    MIN_PLAYERS,
    Player,
    PlayerRole,
    RoleReveal,
    Room,
    RoomPhase,
    RoomSettings,
    SettingsPatch,
    max_imposters_for,
)
from src.rooms.registry import RoomRegistry
from src.logging_config import get_logger

logger = get_logger(__name__)

COUNTDOWN_SECONDS = 6.5
JOINABLE_PHASES = (RoomPhase.LOBBY, RoomPhase.RESULT)


def assign_imposters(players: List[Player], count: int, rng: random.Random) -> List[str]:
    """
    Flag `count` distinct non-host players as imposters, uniformly at random.
    Returns the imposter ids in player order.
    """
    eligible = [p for p in players if not p.is_host]
    count = max(0, min(count, len(eligible)))
    chosen = {p.id for p in rng.sample(eligible, count)}

    for player in players:
        player.is_imposter = player.id in chosen
        player.has_voted = False
        player.vote = None

    return [p.id for p in players if p.is_imposter]


def effective_imposter_count(requested: int, player_count: int) -> int:
    """Imposters actually used for a game: one per four players, at least one innocent."""
    return max(1, min(requested, max_imposters_for(player_count), player_count - 1))


class GameService:
    """
    Validates and applies client intents against a room.

    Host-only and phase-bound operations that fail validation are ignored without
    an error; only `join` raises. Every accepted mutation ends with a broadcast of
    the room snapshot through the notifier.
    """

    def __init__(
        self,
        registry: RoomRegistry,
        notifier: Notifier,
        countdown_seconds: float = COUNTDOWN_SECONDS,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.registry = registry
        self.notifier = notifier
        self.countdown_seconds = countdown_seconds
        self.rng = rng or random.SystemRandom()
        self.clock = clock
        self.votes = VoteScheduler(registry, notifier, clock=clock)
        self.turns = TurnScheduler(registry, notifier, self.votes, clock=clock)

    def _host_room(self, room_code: str, actor_id: str) -> Optional[Room]:
        room = self.registry.get_room(room_code)
        if room is None or room.get_player(actor_id) is None:
            return None
        if not room.is_host(actor_id):
            logger.debug(f"🚫 {actor_id} is not host of room {room.code}, ignoring")
            return None
        return room

    async def join(self, conn_id: str, name: str, room_code: Optional[str] = None, action: str = "join") -> Room:
        """
        Seat a connection in a new or existing room.

        Raises a GameError subclass for structural failures. The caller broadcasts
        once the connection has joined the room channel.
        """
        name = (name or "").strip() if isinstance(name, str) else ""
        if not name or len(name) > MAX_NAME_LENGTH:
            raise InvalidName()

        if self.registry.find_room_of(conn_id) is not None:
            raise AlreadyInRoom()

        if action == "create":
            room = self.registry.create_room(conn_id)
        else:
            room = self.registry.get_room(room_code)
            if room is None:
                logger.warning(f"❌ Room {room_code} not found")
                raise RoomNotFound()
            if room.phase not in JOINABLE_PHASES:
                logger.warning(f"❌ Room {room.code} is mid-game, {name} cannot join")
                raise GameInProgress()

        player = Player(
            id=conn_id,
            name=name,
            avatar=AVATARS[len(room.players) % len(AVATARS)],
        )
        room.players.append(player)
        self.registry.seat(conn_id, room)

        if len(room.players) == 1 or room.host_id == conn_id:
            room.set_host(conn_id)

        logger.info(f"✅ {name} joined room {room.code} ({len(room.players)} players)")
        return room

    async def update_settings(self, room_code: str, actor_id: str, patch: Any) -> bool:
        room = self._host_room(room_code, actor_id)
        if room is None or room.phase != RoomPhase.LOBBY:
            return False

        if not isinstance(patch, dict):
            return False
        try:
            changes = SettingsPatch.model_validate(patch).model_dump(exclude_none=True)
        except ValidationError:
            return False
        if not changes:
            return False

        settings = RoomSettings(**{**room.settings.model_dump(), **changes})
        settings.imposter_count = min(settings.imposter_count, max(1, max_imposters_for(len(room.players))))
        room.settings = settings

        logger.info(f"⚙️ Room {room.code} settings: {settings.model_dump()}")
        await self.notifier.broadcast_state(room)
        return True

    async def reorder_players(self, room_code: str, actor_id: str, new_order: Any) -> bool:
        """Apply a new turn order if it is a permutation of the current players."""
        room = self._host_room(room_code, actor_id)
        if room is None or room.phase != RoomPhase.LOBBY:
            return False

        if not isinstance(new_order, list) or not all(isinstance(pid, str) for pid in new_order):
            return False
        current_ids = [p.id for p in room.players]
        if len(new_order) != len(current_ids) or set(new_order) != set(current_ids):
            logger.debug(f"🔀 Room {room.code}: reorder is not a permutation, ignoring")
            return False

        room.players = [room.get_player(pid) for pid in new_order]
        logger.info(f"🔀 Room {room.code} reordered players")
        await self.notifier.broadcast_state(room)
        return True

    async def start_game(self, room_code: str, actor_id: str, topic: Any) -> bool:
        """Pick imposters, reveal roles privately and begin the countdown."""
        room = self._host_room(room_code, actor_id)
        if room is None or room.phase != RoomPhase.LOBBY:
            return False

        if len(room.players) < MIN_PLAYERS:
            logger.debug(f"🎮 Room {room.code}: not enough players ({len(room.players)})")
            return False

        topic = topic.strip()[:MAX_TOPIC_LENGTH] if isinstance(topic, str) else ""
        if not topic:
            return False

        count = effective_imposter_count(room.settings.imposter_count, len(room.players))
        room.settings.imposter_count = count

        room.clear_game()
        room.imposter_ids = assign_imposters(room.players, count, self.rng)
        room.topic = topic
        room.phase = RoomPhase.COUNTDOWN
        game_no = room.game_no

        reveals = []
        for player in room.players:
            if player.is_imposter:
                reveal = RoleReveal(role=PlayerRole.IMPOSTER, topic=None)
            else:
                reveal = RoleReveal(role=PlayerRole.INNOCENT, topic=topic)
            reveals.append((player.id, reveal.model_dump(mode="json", by_alias=True)))

        # arm before the first await; emits yield to the loop
        room.timer.start(self.countdown_seconds, self.finish_countdown, room, label="countdown")

        logger.info(f"🎮 Game started in room {room.code}: topic='{topic}', imposters={room.imposter_ids}")
        await self.notifier.broadcast_state(room)

        for player_id, payload in reveals:
            if room.game_no != game_no:
                logger.debug(f"🎭 Room {room.code} restarted while revealing roles, dropping the rest")
                break
            await self.notifier.send(player_id, "roleReveal", payload)

        return True

    async def finish_countdown(self, room: Room) -> None:
        if self.registry.get_room(room.code) is not room or room.phase != RoomPhase.COUNTDOWN:
            logger.debug(f"⏰ Stale countdown for room {room.code} dropped")
            return

        room.phase = RoomPhase.GAME
        room.turn_index = 0
        logger.info(f"🎮 Room {room.code} transitioned to GAME phase")
        await self.turns.start_turn(room)

    async def send_message(self, room_code: str, actor_id: str, text: Any) -> bool:
        room = self.registry.get_room(room_code)
        if room is None or not isinstance(text, str):
            return False
        return await self.turns.submit_clue(room, actor_id, text)

    async def submit_vote(self, room_code: str, actor_id: str, target_id: Any) -> bool:
        room = self.registry.get_room(room_code)
        if room is None or not isinstance(target_id, str):
            return False
        return await self.votes.submit(room, actor_id, target_id)

    async def restart(self, room_code: str, actor_id: str) -> bool:
        """Back to the lobby from any phase; the host role moves one seat on."""
        room = self._host_room(room_code, actor_id)
        if room is None:
            return False

        room.clear_game()
        next_index = (room.index_of(room.host_id) + 1) % len(room.players)
        room.set_host(room.players[next_index].id)
        room.phase = RoomPhase.LOBBY

        logger.info(f"🏠 Room {room.code} returned to lobby, host is now {room.players[next_index].name}")
        await self.notifier.broadcast_state(room)
        return True

    async def disconnect(self, conn_id: str) -> Optional[Room]:
        """
        Remove a connection's player. Returns the room if it still exists.

        An empty room is deleted together with its timer. A departing host hands
        over to the new first player. Running turns and votes are repaired so the
        schedule keeps going.
        """
        room = self.registry.find_room_of(conn_id)
        if room is None:
            return None

        index = room.index_of(conn_id)
        leaver = room.players.pop(index)
        self.registry.unseat(conn_id)
        logger.info(f"👋 {leaver.name} left room {room.code} - {len(room.players)} players remaining")

        if not room.players:
            self.registry.delete_room(room.code)
            return None

        new_host: Optional[Player] = None
        if leaver.is_host:
            new_host = room.players[0]
            room.set_host(new_host.id)
            logger.info(f"👑 {new_host.name} is now host of room {room.code}")

        if conn_id in room.imposter_ids:
            room.imposter_ids = [pid for pid in room.imposter_ids if pid != conn_id]

        if room.phase == RoomPhase.GAME:
            was_speaking = index == room.turn_index
            if index < room.turn_index:
                room.turn_index -= 1
            room.turn_index %= len(room.players)
            if was_speaking:
                await self.turns.resume(room)
                return room

        elif room.phase == RoomPhase.VOTING:
            self.votes.discard_vote(room, conn_id)
            if new_host is not None:
                self.votes.discard_vote(room, new_host.id)
            room.timer.cancel()
            await self.votes.continue_or_resolve(room)
            return room

        else:
            room.turn_index = min(room.turn_index, len(room.players) - 1)

        await self.notifier.broadcast_state(room)
        return room

    def stats(self) -> Dict[str, int]:
        rooms = self.registry.rooms()
        return {
            "rooms": len(rooms),
            "players": sum(len(r.players) for r in rooms),
        }
