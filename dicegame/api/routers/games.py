"""Game REST routes."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter
from fastapi import Depends
from fastapi import Query

from dicegame.api.deps import get_runtime
from dicegame.games.schemas import CreateGameRequest
from dicegame.games.schemas import GameActionRequest
from dicegame.runtime import Runtime

router = APIRouter()


@router.get("/api/games")
def get_games(
    game_id: str | None = Query(default=None, alias="gameId"),
    include_started: bool | None = Query(default=None, alias="includeStarted"),
    runtime: Runtime = Depends(get_runtime),
) -> Any:
    """Return one room snapshot when `gameId` is given, else the lobby list."""
    if game_id is not None:
        return runtime.dispatcher.get_snapshot(game_id)

    if include_started is None:
        include_started = not runtime.settings.dicegame_lobby_hide_started
    return runtime.dispatcher.list_snapshots(include_started=include_started)


@router.post("/api/games", status_code=201)
def create_game(
    payload: CreateGameRequest,
    runtime: Runtime = Depends(get_runtime),
) -> dict[str, Any]:
    """Create a room hosted by the caller."""
    return runtime.dispatcher.create_room(payload.username)


@router.put("/api/games")
def apply_game_action(
    payload: GameActionRequest,
    runtime: Runtime = Depends(get_runtime),
) -> dict[str, Any]:
    """Apply one action (join/start/rollDice/holdDice/scoreCategory)."""
    return runtime.dispatcher.apply(
        payload.game_id,
        payload.username,
        payload.action,
        payload.action_args(),
    )
