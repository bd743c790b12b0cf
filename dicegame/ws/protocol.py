"""WebSocket wire protocol helpers."""

from __future__ import annotations

import json
from typing import Annotated
from typing import Any
from typing import Literal
from typing import Union

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import TypeAdapter
from pydantic import ValidationError

WS_PROTOCOL_VERSION = 1

GAME_UPDATE = "gameUpdate"
JOINED_ROOM = "joinedRoom"
LEFT_ROOM = "leftRoom"
ERROR = "error"
PING = "PING"
PONG = "PONG"


class ProtocolError(ValueError):
    """Raised when an inbound frame is not a known client message."""


class JoinRoomMessage(BaseModel):
    """Subscribe this connection to a room's updates."""

    model_config = ConfigDict(populate_by_name=True)

    type: Literal["joinRoom", "joinGameRoom"]
    room_id: str = Field(alias="roomId", min_length=1)


class LeaveRoomMessage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: Literal["leaveRoom"]
    room_id: str = Field(alias="roomId", min_length=1)


class PingMessage(BaseModel):
    type: Literal["PING"]


class PongMessage(BaseModel):
    type: Literal["PONG"]


ClientMessage = Annotated[
    Union[JoinRoomMessage, LeaveRoomMessage, PingMessage, PongMessage],
    Field(discriminator="type"),
]
_client_message_adapter: TypeAdapter[Any] = TypeAdapter(ClientMessage)


def parse_client_message(raw: str) -> JoinRoomMessage | LeaveRoomMessage | PingMessage | PongMessage:
    """Decode one inbound text frame; bare PING/PONG strings are accepted."""
    if raw == PING:
        return PingMessage(type=PING)
    if raw == PONG:
        return PongMessage(type=PONG)
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ProtocolError("message is not valid JSON") from exc
    try:
        return _client_message_adapter.validate_python(payload)
    except ValidationError as exc:
        raise ProtocolError(f"unsupported message: {exc.errors()[0]['msg']}") from exc


def ws_event(event_type: str, payload: dict[str, Any]) -> dict[str, Any]:
    return {"v": WS_PROTOCOL_VERSION, "type": event_type, "payload": payload}


async def ws_send_event(websocket: Any, event_type: str, payload: dict[str, Any]) -> None:
    message = ws_event(event_type, payload)
    if hasattr(websocket, "send_json"):
        await websocket.send_json(message)
        return
    if hasattr(websocket, "send_text"):
        await websocket.send_text(json.dumps(message))
