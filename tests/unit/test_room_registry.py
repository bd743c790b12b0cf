"""Room registry contract tests."""

from __future__ import annotations

import itertools
import threading

import pytest

from dicegame.games.errors import GameNotFoundError
from dicegame.games.errors import InvalidUsernameError
from dicegame.games.registry import RoomRegistry


def test_create_room_makes_host_the_only_player() -> None:
    """Input: create(" alice ") -> Output: lobby room hosted by normalized "alice"."""
    registry = RoomRegistry()

    room = registry.create(" alice ")

    assert room.host == "alice"
    assert room.players == ["alice"]
    assert room.name == "alice's Game"
    assert room.started is False
    assert room.ready is False
    assert room.turn_state is None
    assert registry.get_room(room.id) is room


@pytest.mark.parametrize("host", ["", "   ", None, 7])
def test_create_room_rejects_blank_or_non_string_host(host: object) -> None:
    """Input: blank/non-string host -> Output: InvalidUsernameError and no room."""
    registry = RoomRegistry()

    with pytest.raises(InvalidUsernameError):
        registry.create(host)

    assert len(registry) == 0


def test_room_ids_are_unique_even_when_factory_repeats() -> None:
    """Input: id factory yielding a duplicate -> Output: registry skips the taken id."""
    ids = iter(["room-a", "room-a", "room-b"])
    registry = RoomRegistry(id_factory=lambda: next(ids))

    first = registry.create("alice")
    second = registry.create("bob")

    assert (first.id, second.id) == ("room-a", "room-b")


def test_default_room_ids_are_distinct() -> None:
    """Input: many creates -> Output: no id collisions."""
    registry = RoomRegistry()
    ids = {registry.create(f"user{index}").id for index in range(50)}
    assert len(ids) == 50


def test_get_unknown_room_raises_not_found() -> None:
    """Input: unknown id -> Output: GameNotFoundError with 404 status."""
    registry = RoomRegistry()

    with pytest.raises(GameNotFoundError) as exc_info:
        registry.get_room("missing")

    assert exc_info.value.status_code == 404
    assert exc_info.value.detail == {"game_id": "missing"}


def test_list_rooms_keeps_creation_order_and_filters_started() -> None:
    """Input: two rooms, one started -> Output: full list or only the open one."""
    counter = itertools.count()
    registry = RoomRegistry(id_factory=lambda: f"r{next(counter)}")
    first = registry.create("alice")
    second = registry.create("bob")
    first.started = True

    assert [room.id for room in registry.list_rooms()] == [first.id, second.id]
    assert [room.id for room in registry.list_rooms(include_started=False)] == [second.id]


def test_min_players_below_two_is_rejected() -> None:
    """Input: min_players=1 -> Output: ValueError."""
    with pytest.raises(ValueError):
        RoomRegistry(min_players=1)


def test_ready_follows_configured_min_players() -> None:
    """Input: min_players=3 and two players -> Output: not ready until a third joins."""
    registry = RoomRegistry(min_players=3)
    room = registry.create("alice")
    room.players.append("bob")
    assert room.ready is False
    room.players.append("carol")
    assert room.ready is True


def test_lock_room_is_reentrant_and_exclusive() -> None:
    """Input: nested lock + a second thread -> Output: nesting works, other thread waits."""
    registry = RoomRegistry()
    room = registry.create("alice")
    acquired_by_other = threading.Event()

    def _other() -> None:
        with registry.lock_room(room.id):
            acquired_by_other.set()

    with registry.lock_room(room.id) as locked:
        with registry.lock_room(room.id) as nested:
            assert nested is locked is room
        worker = threading.Thread(target=_other)
        worker.start()
        assert not acquired_by_other.wait(timeout=0.05)

    worker.join(timeout=1.0)
    assert acquired_by_other.is_set()


def test_lock_unknown_room_raises_not_found() -> None:
    """Input: lock_room on unknown id -> Output: GameNotFoundError."""
    registry = RoomRegistry()
    with pytest.raises(GameNotFoundError):
        with registry.lock_room("missing"):
            pass
