import pytest

from src.rooms.models import Player
from src.rooms.registry import RoomRegistry


def test_create_room_generates_four_uppercase_letters():
    registry = RoomRegistry()
    room = registry.create_room("host")
    assert len(room.code) == 4
    assert room.code.isalpha() and room.code.isupper()
    assert room.host_id == "host"
    assert registry.get_room(room.code) is room


def test_code_collision_is_retried():
    codes = iter(["ABCD", "ABCD", "abcd", "WXYZ"])
    registry = RoomRegistry(code_factory=lambda: next(codes))
    first = registry.create_room("a")
    second = registry.create_room("b")
    assert first.code == "ABCD"
    assert second.code == "WXYZ"
    assert len(registry) == 2


def test_code_generation_gives_up():
    registry = RoomRegistry(code_factory=lambda: "ABCD")
    registry.create_room("a")
    with pytest.raises(RuntimeError):
        registry.create_room("b")


def test_lookup_is_case_insensitive():
    registry = RoomRegistry(code_factory=lambda: "QRST")
    room = registry.create_room("a")
    assert registry.get_room(" qrst ") is room
    assert "qrst" in registry
    assert registry.get_room("NOPE") is None
    assert registry.get_room(None) is None


def test_delete_and_close():
    codes = iter(["AAAA", "BBBB"])
    registry = RoomRegistry(code_factory=lambda: next(codes))
    registry.create_room("a")
    registry.create_room("b")

    registry.delete_room("aaaa")
    assert registry.get_room("AAAA") is None
    registry.delete_room("AAAA")  # already gone
    assert len(registry) == 1

    registry.close()
    assert len(registry) == 0
    assert registry.rooms() == []


def test_seats_follow_players_and_rooms():
    codes = iter(["AAAA", "BBBB"])
    registry = RoomRegistry(code_factory=lambda: next(codes))
    first = registry.create_room("a")
    second = registry.create_room("c")
    registry.seat("a", first)
    registry.seat("b", first)
    registry.seat("c", second)

    assert registry.find_room_of("b") is first
    registry.unseat("b")
    assert registry.find_room_of("b") is None

    first.players.append(Player(id="a", name="Ann", avatar="🦊"))
    registry.delete_room("AAAA")
    assert registry.find_room_of("a") is None
    assert registry.find_room_of("c") is second

    registry.close()
    assert registry.find_room_of("c") is None
