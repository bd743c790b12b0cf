"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager
import logging
import random

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dicegame.api.errors import install_error_handlers
from dicegame.api.routers.dice import router as dice_router
from dicegame.api.routers.games import router as games_router
from dicegame.core.config import Settings
from dicegame.core.config import load_settings
from dicegame.core.log import configure_logging
from dicegame.runtime import build_runtime
from dicegame.ws.routers import router as ws_router

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, *, rng: random.Random | None = None) -> FastAPI:
    """Build the app with its own registry, fan-out channel and dispatcher."""
    settings = settings or load_settings()
    configure_logging(settings.dicegame_log_level)
    runtime = build_runtime(settings, rng=rng)

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        await runtime.channel.start()
        logger.info("dicegame started env=%s", settings.dicegame_app_env)
        try:
            yield
        finally:
            await runtime.channel.stop()
            logger.info("dicegame stopped")

    app = FastAPI(title="dicegame", lifespan=lifespan)
    app.state.runtime = runtime
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    install_error_handlers(app)
    app.include_router(games_router)
    app.include_router(dice_router)
    app.include_router(ws_router)
    return app


__all__ = ["create_app"]
