"""Game-domain error taxonomy.

Every guard violation raises one of these before any state is touched. The
HTTP boundary maps `status_code`/`code` onto the response; the websocket
boundary forwards `code` in an `error` event.
"""

from __future__ import annotations

from typing import Any


class GameError(Exception):
    """Base class for game-domain errors."""

    status_code = 400
    code = "GAME_ERROR"

    def __init__(self, message: str, *, detail: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail or {}


class ValidationError(GameError):
    """Malformed or missing input."""

    status_code = 400
    code = "VALIDATION_ERROR"


class AuthorizationError(GameError):
    """Caller is not allowed to perform the action."""

    status_code = 403
    code = "FORBIDDEN"


class NotFoundError(GameError):
    """Referenced entity does not exist."""

    status_code = 404
    code = "NOT_FOUND"


class StateConflictError(GameError):
    """Action is illegal in the room's current phase."""

    status_code = 400
    code = "STATE_CONFLICT"


class InvalidRequestError(ValidationError):
    code = "INVALID_REQUEST"


class InvalidUsernameError(ValidationError):
    code = "INVALID_USERNAME"


class InvalidActionError(ValidationError):
    code = "INVALID_ACTION"


class InvalidCategoryError(ValidationError):
    code = "INVALID_CATEGORY"


class InvalidDiceIndexError(ValidationError):
    code = "INVALID_DICE_INDEX"


class NotYourTurnError(AuthorizationError):
    code = "NOT_YOUR_TURN"


class NotHostError(AuthorizationError):
    code = "NOT_HOST"


class GameNotFoundError(NotFoundError):
    code = "GAME_NOT_FOUND"


class GameAlreadyStartedError(StateConflictError):
    code = "GAME_ALREADY_STARTED"


class AlreadyJoinedError(StateConflictError):
    code = "ALREADY_JOINED"


class NotEnoughPlayersError(StateConflictError):
    code = "NOT_ENOUGH_PLAYERS"


class GameNotStartedError(StateConflictError):
    code = "GAME_NOT_STARTED"


class GameOverError(StateConflictError):
    code = "GAME_OVER"


class NoRollsLeftError(StateConflictError):
    code = "NO_ROLLS_LEFT"


class MustRollFirstError(StateConflictError):
    code = "MUST_ROLL_FIRST"


class CategoryAlreadyScoredError(StateConflictError):
    code = "CATEGORY_ALREADY_SCORED"


__all__ = [
    "AlreadyJoinedError",
    "AuthorizationError",
    "CategoryAlreadyScoredError",
    "GameAlreadyStartedError",
    "GameError",
    "GameNotFoundError",
    "GameNotStartedError",
    "GameOverError",
    "InvalidActionError",
    "InvalidCategoryError",
    "InvalidDiceIndexError",
    "InvalidRequestError",
    "InvalidUsernameError",
    "MustRollFirstError",
    "NoRollsLeftError",
    "NotEnoughPlayersError",
    "NotFoundError",
    "NotHostError",
    "NotYourTurnError",
    "StateConflictError",
    "ValidationError",
]
