"""Per-room subscriber groups and ordered delivery of room updates."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
import logging
from typing import Any

from dicegame.games.events import RoomUpdate

from .protocol import GAME_UPDATE
from .protocol import ws_send_event

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DirectMessage:
    """One event for a single connection, queued behind earlier room updates."""

    websocket: Any
    event_type: str
    payload: dict[str, Any]


class FanoutChannel:
    """Track open connections and push room snapshots to them.

    `publish` may be called from any thread (REST handlers run in a worker
    pool); it only schedules the update onto the event loop. A single pump
    task delivers queued items one at a time, so items published in some
    order are delivered in that order. Connection bookkeeping is touched
    from the event loop only.
    """

    def __init__(self) -> None:
        self._connections: set[Any] = set()
        self._room_subscribers: dict[str, set[Any]] = {}
        self._loop: asyncio.AbstractEventLoop | None = None
        self._queue: asyncio.Queue[RoomUpdate | DirectMessage] | None = None
        self._pump_task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._pump_task is not None and not self._pump_task.done()

    async def start(self) -> None:
        if self.running:
            return
        self._loop = asyncio.get_running_loop()
        queue: asyncio.Queue[RoomUpdate | DirectMessage] = asyncio.Queue()
        self._queue = queue
        self._pump_task = asyncio.create_task(self._pump(queue))

    async def stop(self) -> None:
        task = self._pump_task
        self._pump_task = None
        self._loop = None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def drain(self) -> None:
        """Wait until everything queued so far has been delivered."""
        # let already scheduled put_nowait callbacks land first
        await asyncio.sleep(0)
        if self._queue is not None:
            await self._queue.join()

    def publish(self, update: RoomUpdate) -> None:
        self._enqueue(update)

    def send_direct(self, websocket: Any, event_type: str, payload: dict[str, Any]) -> None:
        self._enqueue(DirectMessage(websocket=websocket, event_type=event_type, payload=payload))

    def _enqueue(self, item: RoomUpdate | DirectMessage) -> None:
        loop = self._loop
        queue = self._queue
        if loop is None or queue is None or loop.is_closed():
            logger.debug("fan-out not running, dropping %s", type(item).__name__)
            return
        loop.call_soon_threadsafe(queue.put_nowait, item)

    def register(self, websocket: Any) -> None:
        self._connections.add(websocket)

    def unregister(self, websocket: Any) -> None:
        self._connections.discard(websocket)
        for room_id in list(self._room_subscribers):
            self.unsubscribe(websocket, room_id)

    def subscribe(self, websocket: Any, room_id: str) -> None:
        self._connections.add(websocket)
        self._room_subscribers.setdefault(room_id, set()).add(websocket)
        logger.debug("connection subscribed room=%s", room_id)

    def unsubscribe(self, websocket: Any, room_id: str) -> None:
        listeners = self._room_subscribers.get(room_id)
        if not listeners:
            return
        listeners.discard(websocket)
        if not listeners:
            self._room_subscribers.pop(room_id, None)

    def connection_count(self) -> int:
        return len(self._connections)

    def subscribers(self, room_id: str) -> set[Any]:
        return set(self._room_subscribers.get(room_id, ()))

    async def _pump(self, queue: asyncio.Queue[RoomUpdate | DirectMessage]) -> None:
        while True:
            item = await queue.get()
            try:
                if isinstance(item, DirectMessage):
                    await self._send_direct(item)
                else:
                    await self.deliver(item)
            finally:
                queue.task_done()

    async def _send_direct(self, message: DirectMessage) -> None:
        if message.websocket not in self._connections:
            return
        try:
            await ws_send_event(message.websocket, message.event_type, message.payload)
        except Exception:
            logger.debug("dropping stale connection after failed direct send")
            self.unregister(message.websocket)

    async def deliver(self, update: RoomUpdate) -> None:
        """Send `update` once to each target connection; drop the ones that fail."""
        if update.lobby:
            targets = list(self._connections)
        else:
            targets = list(self._room_subscribers.get(update.room_id, ()))

        payload = {"type": "update", "game": update.game}
        stale: list[Any] = []
        for websocket in targets:
            try:
                await ws_send_event(websocket, GAME_UPDATE, payload)
            except Exception:
                stale.append(websocket)

        for websocket in stale:
            logger.debug("dropping stale connection room=%s", update.room_id)
            self.unregister(websocket)


__all__ = ["DirectMessage", "FanoutChannel"]
