"""Stateless dice helper route."""

from __future__ import annotations

from fastapi import APIRouter
from fastapi import Depends

from dicegame.api.deps import get_runtime
from dicegame.games.errors import InvalidRequestError
from dicegame.games.schemas import DiceRollRequest
from dicegame.runtime import Runtime

router = APIRouter()

MIN_SIDES = 2


@router.post("/api/dice/roll")
def roll_die(
    payload: DiceRollRequest,
    runtime: Runtime = Depends(get_runtime),
) -> dict[str, int]:
    """Roll one die with `sides` faces."""
    if payload.sides is None or payload.sides < MIN_SIDES:
        raise InvalidRequestError(
            f"sides is required and must be an integer >= {MIN_SIDES}",
            detail={"field": "sides"},
        )
    return {"result": runtime.rng.randint(1, payload.sides)}
