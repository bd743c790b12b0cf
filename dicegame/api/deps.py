"""Dependency helpers shared by API routers."""

from __future__ import annotations

from fastapi import Request
from fastapi import WebSocket

from dicegame.runtime import Runtime


def get_runtime(request: Request) -> Runtime:
    """Return the runtime attached to the application at startup."""
    return request.app.state.runtime


def get_ws_runtime(websocket: WebSocket) -> Runtime:
    return websocket.app.state.runtime
