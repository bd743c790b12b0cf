"""Commit notifications handed from the dispatcher to the fan-out channel."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from typing import Protocol


@dataclass(frozen=True, slots=True)
class RoomUpdate:
    """Post-commit snapshot of one room.

    `lobby` marks changes that alter the lobby listing; those go to every
    connection instead of only the room's subscribers.
    """

    room_id: str
    game: dict[str, Any]
    lobby: bool = False


class UpdatePublisher(Protocol):
    def publish(self, update: RoomUpdate) -> None: ...


class NullPublisher:
    """Publisher that discards updates; for running the core without a transport."""

    def publish(self, update: RoomUpdate) -> None:
        return None
