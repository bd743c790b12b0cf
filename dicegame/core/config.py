"""Application settings for the game server runtime and tests."""

from __future__ import annotations

import logging

from pydantic import Field
from pydantic import field_validator
from pydantic import model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Typed settings loaded from environment variables or explicit kwargs."""

    dicegame_app_env: str = "dev"
    dicegame_app_host: str = "127.0.0.1"
    dicegame_app_port: int = Field(default=8000, ge=1)
    dicegame_log_level: str = "INFO"
    dicegame_cors_allow_origins: str = "*"

    dicegame_min_players: int = Field(default=2, ge=2)
    dicegame_lobby_hide_started: bool = True

    dicegame_heartbeat_interval_seconds: float = Field(default=30.0, gt=0)
    dicegame_heartbeat_pong_timeout_seconds: float = Field(default=10.0, gt=0)
    dicegame_heartbeat_max_missed_pongs: int = Field(default=2, ge=1)

    @field_validator("dicegame_log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {value}")
        return level

    @model_validator(mode="after")
    def validate_heartbeat_window(self) -> "Settings":
        """Ensure a PONG can arrive before the next PING is due."""
        if (
            self.dicegame_heartbeat_pong_timeout_seconds
            >= self.dicegame_heartbeat_interval_seconds
        ):
            raise ValueError(
                "DICEGAME_HEARTBEAT_PONG_TIMEOUT_SECONDS must be less than "
                "DICEGAME_HEARTBEAT_INTERVAL_SECONDS"
            )
        return self

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.dicegame_cors_allow_origins.split(",") if origin.strip()]


def load_settings() -> Settings:
    """Load settings from process environment."""
    return Settings()
