"""WebSocket heartbeat and message-loop utilities."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from datetime import timezone
import logging
from typing import Any

from fastapi import WebSocketDisconnect

from .protocol import ERROR
from .protocol import PING
from .protocol import PONG
from .protocol import PingMessage
from .protocol import PongMessage
from .protocol import ProtocolError
from .protocol import parse_client_message
from .protocol import ws_send_event

logger = logging.getLogger(__name__)

MessageHandler = Callable[[Any, Any], Awaitable[None]]


@dataclass(frozen=True, slots=True)
class HeartbeatConfig:
    interval_seconds: float = 30.0
    pong_timeout_seconds: float = 10.0
    max_missed_pongs: int = 2


class HeartbeatState:
    """Track one websocket heartbeat ping/pong lifecycle."""

    def __init__(self) -> None:
        self.last_ping_at: float | None = None
        self.last_pong_at: float | None = None
        self.missed_pong_count = 0
        self._awaiting_pong = False
        self._pong_event = asyncio.Event()

    def mark_ping_sent(self) -> None:
        self.last_ping_at = datetime.now(timezone.utc).timestamp()
        self._awaiting_pong = True
        self._pong_event.clear()

    def mark_pong_received(self) -> None:
        self.last_pong_at = datetime.now(timezone.utc).timestamp()
        if not self._awaiting_pong:
            return
        self._awaiting_pong = False
        self.missed_pong_count = 0
        self._pong_event.set()

    async def wait_for_pong(self, *, timeout_seconds: float) -> bool:
        if not self._awaiting_pong:
            return True
        try:
            await asyncio.wait_for(self._pong_event.wait(), timeout=timeout_seconds)
        except TimeoutError:
            self._awaiting_pong = False
            self.missed_pong_count += 1
            return False
        return True


async def heartbeat_loop(
    websocket: Any,
    *,
    heartbeat_state: HeartbeatState,
    config: HeartbeatConfig,
) -> None:
    """PING every interval; close the socket after too many missed PONGs."""
    sleep_before_probe = max(config.interval_seconds - config.pong_timeout_seconds, 0.0)
    while True:
        if sleep_before_probe > 0:
            await asyncio.sleep(sleep_before_probe)
        await ws_send_event(websocket, PING, {})
        heartbeat_state.mark_ping_sent()
        pong_received = await heartbeat_state.wait_for_pong(timeout_seconds=config.pong_timeout_seconds)
        if (not pong_received) and heartbeat_state.missed_pong_count >= config.max_missed_pongs:
            logger.info("closing websocket after %d missed pongs", heartbeat_state.missed_pong_count)
            await websocket.close(code=4408, reason="HEARTBEAT_TIMEOUT")
            return


async def handle_ws_message(
    *,
    websocket: Any,
    heartbeat_state: HeartbeatState,
    message: str,
    on_message: MessageHandler,
) -> None:
    try:
        parsed = parse_client_message(message)
    except ProtocolError as exc:
        await ws_send_event(websocket, ERROR, {"error": str(exc), "code": "INVALID_MESSAGE"})
        return

    if isinstance(parsed, PingMessage):
        await ws_send_event(websocket, PONG, {})
        return
    if isinstance(parsed, PongMessage):
        heartbeat_state.mark_pong_received()
        return
    await on_message(websocket, parsed)


async def ws_message_loop(
    websocket: Any,
    *,
    on_message: MessageHandler,
    config: HeartbeatConfig | None = None,
) -> None:
    heartbeat_state = HeartbeatState()
    heartbeat_task = asyncio.create_task(
        heartbeat_loop(websocket, heartbeat_state=heartbeat_state, config=config or HeartbeatConfig())
    )
    try:
        while True:
            message = await websocket.receive_text()
            await handle_ws_message(
                websocket=websocket,
                heartbeat_state=heartbeat_state,
                message=message,
                on_message=on_message,
            )
    except WebSocketDisconnect:
        return
    finally:
        heartbeat_task.cancel()
        try:
            await heartbeat_task
        except asyncio.CancelledError:
            pass
