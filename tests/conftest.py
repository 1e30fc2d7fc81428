import asyncio
import random

import pytest
import pytest_asyncio

from src.game.logic import GameService
from src.rooms.models import RoomPhase
from src.rooms.registry import RoomRegistry


class FakeNotifier:
    def __init__(self):
        self.broadcasts = []
        self.sent = []
        self.errors = []

    async def broadcast_state(self, room):
        self.broadcasts.append(room.snapshot())

    async def send(self, conn_id, event, payload):
        self.sent.append((conn_id, event, payload))

    async def error(self, conn_id, message):
        self.errors.append((conn_id, message))

    def reveals(self):
        return {conn_id: payload for conn_id, event, payload in self.sent if event == "roleReveal"}


class YieldingNotifier(FakeNotifier):
    """Gives the loop a turn on every emit, like a real socket write."""

    async def broadcast_state(self, room):
        await asyncio.sleep(0)
        await super().broadcast_state(room)

    async def send(self, conn_id, event, payload):
        await asyncio.sleep(0)
        await super().send(conn_id, event, payload)


class FakeClock:
    def __init__(self, now=1_700_000_000.0):
        self.now = now

    def __call__(self):
        return self.now


@pytest_asyncio.fixture
async def registry():
    registry = RoomRegistry()
    yield registry
    # cancel timers while the test loop is still running
    registry.close()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def game(registry, notifier, clock):
    return GameService(registry, notifier, rng=random.Random(7), clock=clock)


async def seat(game, count, names=None):
    """Create a room hosted by p0 and seat p1..p{count-1}."""
    names = names or [f"Player{i}" for i in range(count)]
    room = await game.join("p0", names[0], action="create")
    for i in range(1, count):
        await game.join(f"p{i}", names[i], room.code, "join")
    return room


async def start(game, room, topic="Pizza"):
    """Start a game and skip straight past the countdown."""
    assert await game.start_game(room.code, room.host_id, topic)
    await game.finish_countdown(room)
    assert room.phase == RoomPhase.GAME
    return room


async def play_round(game, room, text="clue"):
    for _ in range(len(room.players)):
        await game.send_message(room.code, room.current_player.id, text)


async def reach_voting(game, room):
    await start(game, room)
    while room.phase == RoomPhase.GAME:
        await play_round(game, room)
    assert room.phase == RoomPhase.VOTING
    return room
