"""Turn state machine for one room.

Each transition checks all of its guards first and only then mutates the
room, so a rejected action leaves no trace. Callers must hold the room's
lock from the registry.

    Lobby --start--> AwaitingRoll --roll--> Rolled --roll...--> NoRollsLeft
                          ^                    |                    |
                          +------ score -------+-------- score -----+
                                                   (last open category) --> GameOver
"""

from __future__ import annotations

from collections.abc import Sequence
import random

from dicegame.games import scoring
from dicegame.games.errors import AlreadyJoinedError
from dicegame.games.errors import CategoryAlreadyScoredError
from dicegame.games.errors import GameAlreadyStartedError
from dicegame.games.errors import GameNotStartedError
from dicegame.games.errors import GameOverError
from dicegame.games.errors import InvalidCategoryError
from dicegame.games.errors import InvalidDiceIndexError
from dicegame.games.errors import MustRollFirstError
from dicegame.games.errors import NoRollsLeftError
from dicegame.games.errors import NotEnoughPlayersError
from dicegame.games.errors import NotHostError
from dicegame.games.errors import NotYourTurnError
from dicegame.games.models import DICE_COUNT
from dicegame.games.models import Room
from dicegame.games.models import Scorecard
from dicegame.games.models import TurnState
from dicegame.games.models import UNROLLED


def join(room: Room, username: str) -> None:
    if room.started:
        raise GameAlreadyStartedError("Game has already started", detail={"game_id": room.id})
    if username in room.players:
        raise AlreadyJoinedError("User already in the game", detail={"username": username})

    room.players.append(username)


def start(room: Room, username: str) -> None:
    if room.started:
        raise GameAlreadyStartedError("Game has already started", detail={"game_id": room.id})
    if username != room.host:
        raise NotHostError("Only the host can start the game", detail={"host": room.host})
    if not room.ready:
        raise NotEnoughPlayersError(
            f"At least {room.min_players} players are required to start the game",
            detail={"min_players": room.min_players, "player_count": len(room.players)},
        )

    room.turn_state = TurnState(scores={player: Scorecard() for player in room.players})
    room.started = True


def _require_turn(room: Room, username: str) -> TurnState:
    state = room.turn_state
    if not room.started or state is None:
        raise GameNotStartedError("Game has not started yet", detail={"game_id": room.id})
    if state.game_over:
        raise GameOverError("Game is over", detail={"game_id": room.id})
    if username != room.current_player:
        raise NotYourTurnError("Not your turn!", detail={"current_player": room.current_player})
    return state


def roll_dice(room: Room, username: str, rng: random.Random) -> None:
    state = _require_turn(room, username)
    if state.rolls_left <= 0:
        raise NoRollsLeftError("No rolls left!", detail={"rolls_left": state.rolls_left})

    state.dice = [
        value if held else rng.randint(1, 6)
        for value, held in zip(state.dice, state.held)
    ]
    state.rolls_left -= 1
    state.turn_started = True


def hold_dice(room: Room, username: str, dice_indexes: Sequence[int]) -> None:
    """Toggle the held flag of each listed die; unrolled dice are skipped."""
    state = _require_turn(room, username)
    if not state.turn_started:
        raise MustRollFirstError("Must roll dice before holding")
    for index in dice_indexes:
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < DICE_COUNT:
            raise InvalidDiceIndexError(
                f"diceIndexes must be an array of numbers between 0 and {DICE_COUNT - 1}",
                detail={"dice_indexes": list(dice_indexes)},
            )

    for index in dice_indexes:
        if state.dice[index] != UNROLLED:
            state.held[index] = not state.held[index]


def score_category(room: Room, username: str, category: str) -> int:
    """Score the current dice into `category`, then pass the turn on.

    Returns the points recorded.
    """
    state = _require_turn(room, username)
    if not scoring.is_category(category):
        raise InvalidCategoryError(
            "Invalid category",
            detail={"category": category, "allowed": list(scoring.ALL_CATEGORIES)},
        )
    scorecard = state.scores[username]
    if scorecard.is_scored(category):
        raise CategoryAlreadyScoredError("Category already scored!", detail={"category": category})

    points = scoring.calculate_score(category, state.dice)
    scorecard.categories[category] = points

    state.reset_turn()
    state.current_player_index = (state.current_player_index + 1) % len(room.players)
    state.game_over = all(state.scores[player].is_complete() for player in room.players)
    if state.current_player_index == 0 and not state.game_over:
        state.round += 1
    return points


__all__ = ["hold_dice", "join", "roll_dice", "score_category", "start"]
