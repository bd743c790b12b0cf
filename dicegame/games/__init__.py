"""Game domain package: rooms, turns and scoring."""

from dicegame.games.errors import AuthorizationError
from dicegame.games.errors import GameError
from dicegame.games.errors import NotFoundError
from dicegame.games.errors import StateConflictError
from dicegame.games.errors import ValidationError
from dicegame.games.models import Room
from dicegame.games.models import Scorecard
from dicegame.games.models import TurnState
from dicegame.games.registry import RoomRegistry
from dicegame.games.scoring import ALL_CATEGORIES
from dicegame.games.scoring import calculate_score

__all__ = [
    "ALL_CATEGORIES",
    "AuthorizationError",
    "GameError",
    "NotFoundError",
    "Room",
    "RoomRegistry",
    "Scorecard",
    "StateConflictError",
    "TurnState",
    "ValidationError",
    "calculate_score",
]
