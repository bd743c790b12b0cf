"""In-memory room registry with one write lock per room."""

from __future__ import annotations

from collections.abc import Callable
from collections.abc import Iterator
from contextlib import contextmanager
import threading
import uuid

from dicegame.core.username import UsernameValidationError
from dicegame.core.username import normalize_and_validate_username
from dicegame.games.errors import GameNotFoundError
from dicegame.games.errors import InvalidUsernameError
from dicegame.games.models import DEFAULT_MIN_PLAYERS
from dicegame.games.models import Room


def _new_room_id() -> str:
    return str(uuid.uuid4())


class RoomRegistry:
    """Owns every room created during the process lifetime.

    Rooms are never removed. Reads of the id map and inserts are guarded by
    one short-lived lock; mutations of a room's own state must happen inside
    `lock_room(room_id)`.
    """

    def __init__(
        self,
        *,
        min_players: int = DEFAULT_MIN_PLAYERS,
        id_factory: Callable[[], str] = _new_room_id,
    ) -> None:
        if min_players < 2:
            raise ValueError("min_players must be >= 2")

        self._rooms: dict[str, Room] = {}
        self._room_locks: dict[str, threading.RLock] = {}
        self._rooms_guard = threading.Lock()
        self._min_players = min_players
        self._id_factory = id_factory

    def create(self, host: object) -> Room:
        """Create a room hosted by `host`, who becomes its only player."""
        try:
            host_name = normalize_and_validate_username(host)
        except UsernameValidationError as exc:
            raise InvalidUsernameError(str(exc), detail={"field": "username"}) from exc

        with self._rooms_guard:
            room_id = self._id_factory()
            while room_id in self._rooms:
                room_id = self._id_factory()

            room = Room(
                id=room_id,
                name=f"{host_name}'s Game",
                host=host_name,
                players=[host_name],
                min_players=self._min_players,
            )
            self._rooms[room_id] = room
            self._room_locks[room_id] = threading.RLock()
            return room

    def get_room(self, room_id: str) -> Room:
        """Return room by id or raise `GameNotFoundError`."""
        with self._rooms_guard:
            room = self._rooms.get(room_id)
        if room is None:
            raise GameNotFoundError("Game not found", detail={"game_id": room_id})
        return room

    def list_rooms(self, *, include_started: bool = True) -> list[Room]:
        """Return rooms in creation order, optionally hiding started ones."""
        with self._rooms_guard:
            rooms = list(self._rooms.values())
        if include_started:
            return rooms
        return [room for room in rooms if not room.started]

    def __len__(self) -> int:
        with self._rooms_guard:
            return len(self._rooms)

    @contextmanager
    def lock_room(self, room_id: str) -> Iterator[Room]:
        """Acquire one room write lock and yield the room."""
        room = self.get_room(room_id)
        with self._rooms_guard:
            lock = self._room_locks[room_id]
        with lock:
            yield room


__all__ = ["RoomRegistry"]
