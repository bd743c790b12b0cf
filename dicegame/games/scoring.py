"""Upper-section category scoring."""

from __future__ import annotations

from collections.abc import Sequence

CATEGORY_FACES: dict[str, int] = {
    "ones": 1,
    "twos": 2,
    "threes": 3,
    "fours": 4,
    "fives": 5,
    "sixes": 6,
}
ALL_CATEGORIES: tuple[str, ...] = tuple(CATEGORY_FACES)


def is_category(category: object) -> bool:
    return isinstance(category, str) and category in CATEGORY_FACES


def calculate_score(category: str, dice: Sequence[int]) -> int:
    """Return the points `dice` earn in `category`: face value times matching dice.

    Unknown categories score 0; callers validate membership first.
    """
    face = CATEGORY_FACES.get(category)
    if face is None:
        return 0
    return sum(face for value in dice if value == face)
