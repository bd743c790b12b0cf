"""Pydantic models for game APIs.

Fields are optional so that missing values reach the dispatcher and get its
specific error messages; only JSON types are checked here.
"""

from __future__ import annotations

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import StrictInt
from pydantic import StrictStr


class CreateGameRequest(BaseModel):
    """POST /api/games request body."""

    username: StrictStr | None = None


class GameActionRequest(BaseModel):
    """PUT /api/games request body."""

    model_config = ConfigDict(populate_by_name=True)

    game_id: StrictStr | None = Field(default=None, alias="gameId")
    username: StrictStr | None = None
    action: StrictStr | None = None
    category: StrictStr | None = None
    dice_indexes: list[StrictInt] | None = Field(default=None, alias="diceIndexes")

    def action_args(self) -> dict[str, object]:
        return {"category": self.category, "diceIndexes": self.dice_indexes}


class DiceRollRequest(BaseModel):
    """POST /api/dice/roll request body."""

    sides: StrictInt | None = None
