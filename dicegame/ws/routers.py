"""WebSocket route handler for lobby and room subscriptions."""

from __future__ import annotations

from functools import partial
import logging
from typing import Any

from fastapi import APIRouter
from fastapi import WebSocket
from fastapi import WebSocketDisconnect

from dicegame.api.deps import get_ws_runtime
from dicegame.games.errors import GameError
from dicegame.games.views import room_detail
from dicegame.runtime import Runtime

from .heartbeat import ws_message_loop
from .protocol import ERROR
from .protocol import JOINED_ROOM
from .protocol import LEFT_ROOM
from .protocol import JoinRoomMessage
from .protocol import LeaveRoomMessage
from .protocol import ws_send_event

logger = logging.getLogger(__name__)

router = APIRouter()


async def join_room(websocket: Any, room_id: str, *, runtime: Runtime) -> None:
    """Subscribe, then queue an ack carrying a snapshot taken under the room lock.

    The ack goes through the channel queue, so updates committed before the
    snapshot are delivered before it and later ones after it.
    """
    channel = runtime.channel
    try:
        runtime.registry.get_room(room_id)
    except GameError as exc:
        await ws_send_event(websocket, ERROR, {"error": exc.message, "code": exc.code, "roomId": room_id})
        return

    channel.subscribe(websocket, room_id)
    with runtime.registry.lock_room(room_id) as room:
        channel.send_direct(websocket, JOINED_ROOM, {"roomId": room_id, "game": room_detail(room)})


async def handle_client_message(websocket: Any, message: Any, *, runtime: Runtime) -> None:
    if isinstance(message, JoinRoomMessage):
        await join_room(websocket, message.room_id, runtime=runtime)
    elif isinstance(message, LeaveRoomMessage):
        runtime.channel.unsubscribe(websocket, message.room_id)
        logger.debug("connection unsubscribed room=%s", message.room_id)
        runtime.channel.send_direct(websocket, LEFT_ROOM, {"roomId": message.room_id})


@router.websocket("/ws")
async def ws_game(websocket: WebSocket) -> None:
    """Game websocket: lobby broadcasts for every client, room updates after joinRoom."""
    runtime = get_ws_runtime(websocket)
    await websocket.accept()
    runtime.channel.register(websocket)
    logger.debug("websocket connected, open=%d", runtime.channel.connection_count())
    try:
        await ws_message_loop(
            websocket,
            on_message=partial(handle_client_message, runtime=runtime),
            config=runtime.heartbeat,
        )
    except WebSocketDisconnect:
        return
    finally:
        runtime.channel.unregister(websocket)
        logger.debug("websocket closed, open=%d", runtime.channel.connection_count())
