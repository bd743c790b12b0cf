"""Single entry point for room mutations."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
import logging
import random
from typing import Any

from dicegame.core.username import UsernameValidationError
from dicegame.core.username import normalize_and_validate_username
from dicegame.games import turns
from dicegame.games.errors import GameError
from dicegame.games.errors import InvalidActionError
from dicegame.games.errors import InvalidDiceIndexError
from dicegame.games.errors import InvalidRequestError
from dicegame.games.errors import InvalidUsernameError
from dicegame.games.events import NullPublisher
from dicegame.games.events import RoomUpdate
from dicegame.games.events import UpdatePublisher
from dicegame.games.models import Room
from dicegame.games.registry import RoomRegistry
from dicegame.games.views import room_detail

logger = logging.getLogger(__name__)


class GameAction(str, Enum):
    JOIN = "join"
    START = "start"
    ROLL_DICE = "rollDice"
    HOLD_DICE = "holdDice"
    SCORE_CATEGORY = "scoreCategory"


# Actions that change what the lobby list shows.
LOBBY_ACTIONS = frozenset({GameAction.JOIN, GameAction.START})


def _require_text(value: object, field: str) -> str:
    if not isinstance(value, str) or value.strip() == "":
        raise InvalidRequestError(
            f"{field} is required and must be a non-empty string",
            detail={"field": field},
        )
    return value


def _parse_username(value: object) -> str:
    try:
        return normalize_and_validate_username(value)
    except UsernameValidationError as exc:
        raise InvalidUsernameError(str(exc), detail={"field": "username"}) from exc


def _parse_action(value: object) -> GameAction:
    action = _require_text(value, "action")
    try:
        return GameAction(action)
    except ValueError:
        raise InvalidActionError(
            "Invalid action",
            detail={"action": action, "allowed": [item.value for item in GameAction]},
        ) from None


def _parse_dice_indexes(args: Mapping[str, Any]) -> list[int]:
    indexes = args.get("diceIndexes")
    if not isinstance(indexes, (list, tuple)) or not all(
        isinstance(index, int) and not isinstance(index, bool) for index in indexes
    ):
        raise InvalidDiceIndexError(
            "diceIndexes must be an array of numbers",
            detail={"field": "diceIndexes"},
        )
    return list(indexes)


class ActionDispatcher:
    """Validate, apply and announce actions against rooms in the registry.

    At most one action per room is in flight: guard evaluation, mutation,
    snapshot and publish all happen under that room's lock, so subscribers
    see snapshots in commit order. Rooms do not block each other.
    """

    def __init__(
        self,
        registry: RoomRegistry,
        publisher: UpdatePublisher | None = None,
        *,
        rng: random.Random | None = None,
    ) -> None:
        self._registry = registry
        self._publisher = publisher or NullPublisher()
        self._rng = rng or random.Random()

    def create_room(self, host: object) -> dict[str, Any]:
        """Create a room for `host` and announce it lobby-wide."""
        room = self._registry.create(host)
        with self._registry.lock_room(room.id):
            snapshot = room_detail(room)
            self._publisher.publish(RoomUpdate(room_id=room.id, game=snapshot, lobby=True))
        logger.info("room created id=%s host=%s", room.id, room.host)
        return snapshot

    def get_snapshot(self, room_id: object) -> dict[str, Any]:
        room_id = _require_text(room_id, "gameId")
        with self._registry.lock_room(room_id) as room:
            return room_detail(room)

    def list_snapshots(self, *, include_started: bool = True) -> list[dict[str, Any]]:
        snapshots = []
        for room in self._registry.list_rooms(include_started=include_started):
            with self._registry.lock_room(room.id):
                if include_started or not room.started:
                    snapshots.append(room_detail(room))
        return snapshots

    def apply(
        self,
        room_id: object,
        username: object,
        action: object,
        args: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Apply one action and return the committed room snapshot."""
        room_id = _require_text(room_id, "gameId")
        _require_text(username, "username")
        player = _parse_username(username)
        _require_text(action, "action")
        args = args or {}

        try:
            with self._registry.lock_room(room_id) as room:
                kind = _parse_action(action)
                self._transition(room, player, kind, args)
                snapshot = room_detail(room)
                self._publisher.publish(
                    RoomUpdate(room_id=room.id, game=snapshot, lobby=kind in LOBBY_ACTIONS)
                )
        except GameError as exc:
            logger.info(
                "action rejected room=%s user=%s action=%s code=%s",
                room_id,
                player,
                action,
                exc.code,
            )
            raise
        return snapshot

    def _transition(self, room: Room, player: str, kind: GameAction, args: Mapping[str, Any]) -> None:
        if kind is GameAction.JOIN:
            turns.join(room, player)
            logger.info("player joined room=%s user=%s players=%d", room.id, player, len(room.players))
        elif kind is GameAction.START:
            turns.start(room, player)
            logger.info("game started room=%s players=%s", room.id, ",".join(room.players))
        elif kind is GameAction.ROLL_DICE:
            turns.roll_dice(room, player, self._rng)
            logger.debug("dice rolled room=%s user=%s dice=%s", room.id, player, room.turn_state.dice)
        elif kind is GameAction.HOLD_DICE:
            turns.hold_dice(room, player, _parse_dice_indexes(args))
            logger.debug("dice held room=%s user=%s held=%s", room.id, player, room.turn_state.held)
        elif kind is GameAction.SCORE_CATEGORY:
            category = args.get("category")
            points = turns.score_category(room, player, category)
            logger.debug("category scored room=%s user=%s %s=%d", room.id, player, category, points)
            if room.turn_state.game_over:
                logger.info("game over room=%s", room.id)


__all__ = ["ActionDispatcher", "GameAction", "LOBBY_ACTIONS"]
