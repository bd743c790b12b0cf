"""Room snapshot builders shared by the dispatcher, REST and WS responses."""

from __future__ import annotations

from typing import Any

from dicegame.games.models import Room
from dicegame.games.models import Scorecard
from dicegame.games.models import TurnState


def scorecard_detail(scorecard: Scorecard) -> dict[str, int | None]:
    return {**scorecard.categories, "total": scorecard.total}


def turn_state_detail(room: Room, state: TurnState) -> dict[str, Any]:
    return {
        "scores": {player: scorecard_detail(card) for player, card in state.scores.items()},
        "dice": list(state.dice),
        "held": list(state.held),
        "rollsLeft": state.rolls_left,
        "currentPlayer": room.current_player,
        "currentPlayerIndex": state.current_player_index,
        "turnStarted": state.turn_started,
        "gameOver": state.game_over,
        "round": state.round,
    }


def room_detail(room: Room) -> dict[str, Any]:
    """Full room snapshot, detached from the live room object."""
    return {
        "id": room.id,
        "name": room.name,
        "host": room.host,
        "players": list(room.players),
        "ready": room.ready,
        "started": room.started,
        "turnState": None if room.turn_state is None else turn_state_detail(room, room.turn_state),
    }
