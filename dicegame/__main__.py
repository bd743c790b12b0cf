"""Run the server with uvicorn: `python -m dicegame`."""

from __future__ import annotations

import uvicorn

from dicegame.core.config import load_settings
from dicegame.main import create_app


def main() -> None:
    settings = load_settings()
    uvicorn.run(
        create_app(settings),
        host=settings.dicegame_app_host,
        port=settings.dicegame_app_port,
        log_level=settings.dicegame_log_level.lower(),
    )


if __name__ == "__main__":
    main()
