import random

import pytest

from src.game.logic import GameService
from src.sockets.gateway import ConnectionGateway
from src.sockets.notifier import SocketNotifier


class FakeManager:
    def __init__(self):
        self.disconnected = set()

    def is_connected(self, sid, namespace):
        return sid not in self.disconnected


class FakeSio:
    """Stand-in for socketio.AsyncServer that records handlers and emits."""

    def __init__(self):
        self.manager = FakeManager()
        self.handlers = {}
        self.emitted = []
        self.rooms = {}

    def on(self, event, handler=None, namespace=None):
        def set_handler(fn):
            self.handlers[event] = fn
            return fn
        if handler is not None:
            return set_handler(handler)
        return set_handler

    async def emit(self, event, data=None, room=None, **kwargs):
        self.emitted.append((event, data, room))

    async def enter_room(self, sid, room, namespace=None):
        self.rooms.setdefault(room, set()).add(sid)

    def events_to(self, room, event):
        return [data for name, data, target in self.emitted if name == event and target == room]


@pytest.fixture
def sio():
    return FakeSio()


@pytest.fixture
def gateway(sio, registry):
    notifier = SocketNotifier(sio)
    game = GameService(registry, notifier, rng=random.Random(5))
    gateway = ConnectionGateway(sio, game, notifier)
    gateway.register()
    return gateway


async def _join_four(sio):
    await sio.handlers["join"]("s0", {"name": "Ann", "action": "create"})
    code = next(iter(sio.rooms))
    for i, name in enumerate(["Ben", "Cat", "Dan"], start=1):
        await sio.handlers["join"](f"s{i}", {"name": name, "roomId": code.lower(), "action": "join"})
    return code


@pytest.mark.asyncio
async def test_all_intents_are_registered(gateway, sio):
    assert set(sio.handlers) >= {
        "connect", "disconnect", "join", "reorderPlayers", "updateSettings",
        "startGame", "sendMessage", "submitVote", "restartGame",
    }


@pytest.mark.asyncio
async def test_connect_greets_with_sid(gateway, sio):
    await sio.handlers["connect"]("s0", {})
    assert sio.emitted == [("connected", {"sid": "s0"}, "s0")]


@pytest.mark.asyncio
async def test_join_enters_room_and_broadcasts(gateway, sio):
    code = await _join_four(sio)
    assert sio.rooms[code] == {"s0", "s1", "s2", "s3"}
    assert gateway.room_code("s2") == code

    states = sio.events_to(code, "gameState")
    assert len(states) == 4
    assert [p["name"] for p in states[-1]["players"]] == ["Ann", "Ben", "Cat", "Dan"]
    assert states[-1]["players"][0]["isHost"] is True


@pytest.mark.asyncio
async def test_join_errors_go_to_caller_only(gateway, sio):
    await sio.handlers["join"]("s9", {"name": "Eve", "roomId": "NOPE", "action": "join"})
    assert sio.emitted == [("error", {"message": "Room not found"}, "s9")]
    assert gateway.room_code("s9") is None

    code = await _join_four(sio)
    await sio.handlers["startGame"]("s0", {"topic": "Pizza"})
    sio.emitted.clear()
    await sio.handlers["join"]("s8", {"name": "Late", "roomId": code, "action": "join"})
    assert sio.emitted == [("error", {"message": "Game already in progress"}, "s8")]


@pytest.mark.asyncio
async def test_start_game_sends_private_reveals(gateway, sio):
    code = await _join_four(sio)
    await sio.handlers["startGame"]("s0", {"topic": "Pizza"})

    assert sio.events_to(code, "gameState")[-1]["phase"] == "countdown"
    reveals = {sid: sio.events_to(sid, "roleReveal") for sid in ["s0", "s1", "s2", "s3"]}
    assert all(len(r) == 1 for r in reveals.values())
    roles = sorted(r[0]["role"] for r in reveals.values())
    assert roles == ["imposter", "innocent", "innocent", "innocent"]
    assert reveals["s0"][0] == {"role": "innocent", "topic": "Pizza"}


@pytest.mark.asyncio
async def test_intents_from_unseated_connections_are_ignored(gateway, sio):
    for event in ["startGame", "sendMessage", "submitVote", "reorderPlayers", "updateSettings", "restartGame"]:
        await sio.handlers[event]("ghost", {})
    assert sio.emitted == []


@pytest.mark.asyncio
async def test_malformed_payloads_are_ignored(gateway, sio):
    code = await _join_four(sio)
    sio.emitted.clear()
    await sio.handlers["startGame"]("s0", "Pizza")
    await sio.handlers["updateSettings"]("s0", ["clueTimeout"])
    await sio.handlers["reorderPlayers"]("s0", {"newOrder": "s0"})
    await sio.handlers["join"]("s7", None)
    assert sio.emitted == [("error", {"message": "Name must be 1-20 characters"}, "s7")]
    assert gateway.game.registry.get_room(code).phase.value == "lobby"


@pytest.mark.asyncio
async def test_disconnect_updates_remaining_members(gateway, sio, registry):
    code = await _join_four(sio)
    sio.emitted.clear()

    await sio.handlers["disconnect"]("s0")
    state = sio.events_to(code, "gameState")[-1]
    assert state["hostId"] == "s1"
    assert [p["id"] for p in state["players"]] == ["s1", "s2", "s3"]
    assert gateway.room_code("s0") is None

    for sid in ["s1", "s2", "s3"]:
        await sio.handlers["disconnect"](sid, "client disconnect")
    assert registry.get_room(code) is None

    # unknown sid
    await sio.handlers["disconnect"]("nobody")


@pytest.mark.asyncio
async def test_restart_over_the_wire(gateway, sio):
    code = await _join_four(sio)
    await sio.handlers["startGame"]("s0", {"topic": "Pizza"})
    await sio.handlers["restartGame"]("s1", {})
    assert sio.events_to(code, "gameState")[-1]["phase"] == "countdown"

    await sio.handlers["restartGame"]("s0")
    state = sio.events_to(code, "gameState")[-1]
    assert state["phase"] == "lobby"
    assert state["hostId"] == "s1"


@pytest.mark.asyncio
async def test_join_finishing_after_hangup_is_rolled_back(gateway, sio, registry):
    await sio.handlers["connect"]("s0", {})
    sio.manager.disconnected.add("s0")
    await sio.handlers["disconnect"]("s0", "transport close")

    # the join task only gets to run now
    await sio.handlers["join"]("s0", {"name": "Ghost", "action": "create"})
    assert len(registry) == 0
    assert gateway.room_code("s0") is None
    assert sio.events_to("s0", "gameState") == []


@pytest.mark.asyncio
async def test_late_join_into_existing_room_leaves_no_phantom(gateway, sio, registry):
    code = await _join_four(sio)
    sio.manager.disconnected.add("s4")
    await sio.handlers["disconnect"]("s4")
    await sio.handlers["join"]("s4", {"name": "Eve", "roomId": code, "action": "join"})

    room = registry.get_room(code)
    assert [p.id for p in room.players] == ["s0", "s1", "s2", "s3"]
    assert registry.find_room_of("s4") is None


@pytest.mark.asyncio
async def test_disconnect_without_session_still_leaves_room(gateway, sio, registry):
    # seated by the game but the gateway never stored a session
    room = await gateway.game.join("s0", "Ann", action="create")
    await gateway.game.join("s1", "Ben", room.code, "join")

    await sio.handlers["disconnect"]("s1")
    assert [p.id for p in room.players] == ["s0"]
    assert registry.find_room_of("s1") is None
