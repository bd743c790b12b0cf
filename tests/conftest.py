"""Shared fixtures for dicegame tests."""

from __future__ import annotations

from collections.abc import Iterable
from collections.abc import Iterator
import itertools
import random

import pytest
from fastapi.testclient import TestClient

from dicegame.core.config import Settings
from dicegame.main import create_app


class ScriptedRandom(random.Random):
    """Random source whose `randint` replays queued values, then cycles 1..6."""

    def __init__(self, values: Iterable[int] = ()) -> None:
        super().__init__(0)
        self._queued = list(values)
        self._fallback = itertools.cycle(range(1, 7))

    def queue(self, *values: int) -> None:
        self._queued.extend(values)

    def randint(self, a: int, b: int) -> int:
        value = self._queued.pop(0) if self._queued else next(self._fallback)
        return min(max(value, a), b)


@pytest.fixture
def scripted_rng() -> ScriptedRandom:
    return ScriptedRandom()


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the developer's environment defaults that matter to tests."""
    return Settings(
        dicegame_log_level="WARNING",
        dicegame_lobby_hide_started=True,
        dicegame_min_players=2,
        dicegame_heartbeat_interval_seconds=30.0,
        dicegame_heartbeat_pong_timeout_seconds=10.0,
    )


@pytest.fixture
def client(settings: Settings, scripted_rng: ScriptedRandom) -> Iterator[TestClient]:
    """TestClient with lifespan running, so websocket fan-out is live."""
    with TestClient(create_app(settings, rng=scripted_rng)) as test_client:
        yield test_client
