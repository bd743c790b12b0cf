"""In-memory room and turn-state models."""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field

from dicegame.games.scoring import ALL_CATEGORIES

DICE_COUNT = 5
MAX_ROLLS = 3
UNROLLED = 0
DEFAULT_MIN_PLAYERS = 2


def _fresh_dice() -> list[int]:
    return [UNROLLED] * DICE_COUNT


def _fresh_held() -> list[bool]:
    return [False] * DICE_COUNT


@dataclass(slots=True)
class Scorecard:
    """One player's per-category record; `None` marks an open category."""

    categories: dict[str, int | None] = field(
        default_factory=lambda: {category: None for category in ALL_CATEGORIES}
    )

    @property
    def total(self) -> int:
        return sum(points for points in self.categories.values() if points is not None)

    def is_scored(self, category: str) -> bool:
        return self.categories.get(category) is not None

    def is_complete(self) -> bool:
        return all(points is not None for points in self.categories.values())


@dataclass(slots=True)
class TurnState:
    """Game-in-progress data, created once when the host starts the room."""

    scores: dict[str, Scorecard]
    dice: list[int] = field(default_factory=_fresh_dice)
    held: list[bool] = field(default_factory=_fresh_held)
    rolls_left: int = MAX_ROLLS
    current_player_index: int = 0
    turn_started: bool = False
    game_over: bool = False
    round: int = 1

    def reset_turn(self) -> None:
        self.dice = _fresh_dice()
        self.held = _fresh_held()
        self.rolls_left = MAX_ROLLS
        self.turn_started = False


@dataclass(slots=True)
class Room:
    """Room aggregate: lobby membership plus the optional turn state."""

    id: str
    name: str
    host: str
    players: list[str] = field(default_factory=list)
    started: bool = False
    turn_state: TurnState | None = None
    min_players: int = DEFAULT_MIN_PLAYERS

    @property
    def ready(self) -> bool:
        return len(self.players) >= self.min_players

    @property
    def current_player(self) -> str | None:
        if self.turn_state is None or not self.players:
            return None
        return self.players[self.turn_state.current_player_index]


__all__ = [
    "DEFAULT_MIN_PLAYERS",
    "DICE_COUNT",
    "MAX_ROLLS",
    "UNROLLED",
    "Room",
    "Scorecard",
    "TurnState",
]
