"""Process runtime shared by REST and WebSocket handlers."""

from __future__ import annotations

from dataclasses import dataclass
import random

from dicegame.core.config import Settings
from dicegame.games.dispatcher import ActionDispatcher
from dicegame.games.registry import RoomRegistry
from dicegame.ws.fanout import FanoutChannel
from dicegame.ws.heartbeat import HeartbeatConfig


@dataclass(slots=True)
class Runtime:
    """Everything one server process owns; built once at app creation."""

    settings: Settings
    registry: RoomRegistry
    channel: FanoutChannel
    dispatcher: ActionDispatcher
    rng: random.Random

    @property
    def heartbeat(self) -> HeartbeatConfig:
        return HeartbeatConfig(
            interval_seconds=self.settings.dicegame_heartbeat_interval_seconds,
            pong_timeout_seconds=self.settings.dicegame_heartbeat_pong_timeout_seconds,
            max_missed_pongs=self.settings.dicegame_heartbeat_max_missed_pongs,
        )


def build_runtime(settings: Settings, *, rng: random.Random | None = None) -> Runtime:
    rng = rng or random.Random()
    registry = RoomRegistry(min_players=settings.dicegame_min_players)
    channel = FanoutChannel()
    dispatcher = ActionDispatcher(registry, channel, rng=rng)
    return Runtime(
        settings=settings,
        registry=registry,
        channel=channel,
        dispatcher=dispatcher,
        rng=rng,
    )


__all__ = ["Runtime", "build_runtime"]
