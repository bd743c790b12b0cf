"""Action dispatcher tests: parsing, routing, publishing."""

from __future__ import annotations

from pathlib import Path
import subprocess
import sys

import pytest

from dicegame.games.dispatcher import ActionDispatcher
from dicegame.games.errors import GameNotFoundError
from dicegame.games.errors import InvalidActionError
from dicegame.games.errors import InvalidDiceIndexError
from dicegame.games.errors import InvalidRequestError
from dicegame.games.errors import NotYourTurnError
from dicegame.games.events import RoomUpdate
from dicegame.games.registry import RoomRegistry


class _RecordingPublisher:
    def __init__(self) -> None:
        self.updates: list[RoomUpdate] = []

    def publish(self, update: RoomUpdate) -> None:
        self.updates.append(update)


class _FixedRng:
    def __init__(self, value: int) -> None:
        self.value = value

    def randint(self, a: int, b: int) -> int:
        return self.value


def _dispatcher(value: int = 4) -> tuple[ActionDispatcher, _RecordingPublisher]:
    publisher = _RecordingPublisher()
    return ActionDispatcher(RoomRegistry(), publisher, rng=_FixedRng(value)), publisher


def _started_room(dispatcher: ActionDispatcher) -> str:
    room_id = dispatcher.create_room("alice")["id"]
    dispatcher.apply(room_id, "bob", "join")
    dispatcher.apply(room_id, "alice", "start")
    return room_id


def test_create_room_returns_snapshot_and_publishes_lobby_update() -> None:
    """Input: create_room("alice") -> Output: camelCase snapshot, one lobby-wide update."""
    dispatcher, publisher = _dispatcher()

    snapshot = dispatcher.create_room("alice")

    assert snapshot == {
        "id": snapshot["id"],
        "name": "alice's Game",
        "host": "alice",
        "players": ["alice"],
        "ready": False,
        "started": False,
        "turnState": None,
    }
    assert publisher.updates == [RoomUpdate(room_id=snapshot["id"], game=snapshot, lobby=True)]


def test_apply_publishes_same_snapshot_it_returns() -> None:
    """Input: join/start/rollDice -> Output: one update per commit, lobby flag only for join/start."""
    dispatcher, publisher = _dispatcher()
    room_id = dispatcher.create_room("alice")["id"]
    publisher.updates.clear()

    joined = dispatcher.apply(room_id, "bob", "join")
    started = dispatcher.apply(room_id, "alice", "start")
    rolled = dispatcher.apply(room_id, "alice", "rollDice")

    assert [update.game for update in publisher.updates] == [joined, started, rolled]
    assert [update.lobby for update in publisher.updates] == [True, True, False]
    assert rolled["turnState"]["dice"] == [4, 4, 4, 4, 4]
    assert rolled["turnState"]["rollsLeft"] == 2
    assert rolled["turnState"]["currentPlayer"] == "alice"


def test_snapshots_are_detached_from_live_room() -> None:
    """Input: mutate after snapshot -> Output: earlier snapshot unchanged."""
    dispatcher, _ = _dispatcher()
    room_id = _started_room(dispatcher)
    before = dispatcher.get_snapshot(room_id)

    dispatcher.apply(room_id, "alice", "rollDice")

    assert before["turnState"]["dice"] == [0, 0, 0, 0, 0]
    assert before["turnState"]["rollsLeft"] == 3


def test_rejected_action_publishes_nothing() -> None:
    """Input: bob rolls out of turn -> Output: NotYourTurnError and no update."""
    dispatcher, publisher = _dispatcher()
    room_id = _started_room(dispatcher)
    publisher.updates.clear()

    with pytest.raises(NotYourTurnError):
        dispatcher.apply(room_id, "bob", "rollDice")

    assert publisher.updates == []


@pytest.mark.parametrize(
    ("room_id", "username", "action", "error"),
    [
        (None, "alice", "join", InvalidRequestError),
        ("  ", "alice", "join", InvalidRequestError),
        ("x", "", "join", InvalidRequestError),
        ("x", "alice", None, InvalidRequestError),
    ],
)
def test_missing_fields_are_validation_errors(
    room_id: object,
    username: object,
    action: object,
    error: type[Exception],
) -> None:
    """Input: blank/missing gameId, username or action -> Output: 400-class validation error."""
    dispatcher, _ = _dispatcher()

    with pytest.raises(error) as exc_info:
        dispatcher.apply(room_id, username, action)

    assert exc_info.value.status_code == 400


def test_unknown_room_is_not_found() -> None:
    """Input: apply to unknown gameId -> Output: GameNotFoundError."""
    dispatcher, _ = _dispatcher()

    with pytest.raises(GameNotFoundError):
        dispatcher.apply("missing", "alice", "join")


def test_unknown_action_is_rejected() -> None:
    """Input: action "fold" -> Output: InvalidActionError listing the allowed actions."""
    dispatcher, _ = _dispatcher()
    room_id = dispatcher.create_room("alice")["id"]

    with pytest.raises(InvalidActionError) as exc_info:
        dispatcher.apply(room_id, "bob", "fold")

    assert exc_info.value.message == "Invalid action"
    assert "rollDice" in exc_info.value.detail["allowed"]


@pytest.mark.parametrize("dice_indexes", [None, "0,1", [0, "1"], [True], 2])
def test_hold_requires_integer_list(dice_indexes: object) -> None:
    """Input: malformed diceIndexes -> Output: InvalidDiceIndexError."""
    dispatcher, _ = _dispatcher()
    room_id = _started_room(dispatcher)
    dispatcher.apply(room_id, "alice", "rollDice")

    with pytest.raises(InvalidDiceIndexError):
        dispatcher.apply(room_id, "alice", "holdDice", {"diceIndexes": dice_indexes})


def test_hold_and_score_route_their_arguments() -> None:
    """Input: hold [0, 4], then score fours -> Output: held flags set, 20 points recorded."""
    dispatcher, _ = _dispatcher(value=4)
    room_id = _started_room(dispatcher)
    dispatcher.apply(room_id, "alice", "rollDice")

    held = dispatcher.apply(room_id, "alice", "holdDice", {"diceIndexes": [0, 4]})
    scored = dispatcher.apply(room_id, "alice", "scoreCategory", {"category": "fours"})

    assert held["turnState"]["held"] == [True, False, False, False, True]
    assert scored["turnState"]["scores"]["alice"]["fours"] == 20
    assert scored["turnState"]["scores"]["alice"]["total"] == 20
    assert scored["turnState"]["currentPlayer"] == "bob"


def test_list_snapshots_hides_started_rooms_on_request() -> None:
    """Input: one open, one started room -> Output: include_started toggles the started one."""
    dispatcher, _ = _dispatcher()
    started_id = _started_room(dispatcher)
    open_id = dispatcher.create_room("carol")["id"]

    all_ids = [game["id"] for game in dispatcher.list_snapshots(include_started=True)]
    open_ids = [game["id"] for game in dispatcher.list_snapshots(include_started=False)]

    assert all_ids == [started_id, open_id]
    assert open_ids == [open_id]


def test_dispatcher_without_publisher_still_applies() -> None:
    """Input: no publisher -> Output: actions commit normally."""
    dispatcher = ActionDispatcher(RoomRegistry(), rng=_FixedRng(2))
    room_id = dispatcher.create_room("alice")["id"]

    assert dispatcher.apply(room_id, "bob", "join")["players"] == ["alice", "bob"]


def test_game_layer_imports_without_http_boundary() -> None:
    """Input: fresh interpreter imports the dispatcher -> Output: no dicegame.api module loaded."""
    code = (
        "import sys\n"
        "import dicegame.games.dispatcher\n"
        "print(sorted(name for name in sys.modules if name.startswith('dicegame.api')))\n"
    )
    result = subprocess.run(
        [sys.executable, "-c", code],
        capture_output=True,
        text=True,
        check=True,
        cwd=Path(__file__).resolve().parents[2],
    )

    assert result.stdout.strip() == "[]"
