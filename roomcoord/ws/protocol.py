"""WebSocket wire protocol helpers."""

from __future__ import annotations

import json
from typing import Any

WS_PROTOCOL_VERSION = 1

# server -> client
EVENT_INIT = "init"
EVENT_LOBBY_UPDATE = "lobbyUpdate"
EVENT_PLAYER_JOINED = "playerJoined"
EVENT_PLAYER_LEFT = "playerLeft"
EVENT_GAME_START = "gameStart"
EVENT_GAME_END = "gameEnd"
EVENT_ERROR = "error"
EVENT_PING = "PING"
EVENT_PONG = "PONG"

# client -> server
CLIENT_READY = "ready"
CLIENT_START_GAME = "startGame"

CLOSE_INVALID_ROOM_ID = 4400
CLOSE_HEARTBEAT_TIMEOUT = 4408


def ws_event(event_type: str, payload: dict[str, Any]) -> dict[str, Any]:
    return {"v": WS_PROTOCOL_VERSION, "type": event_type, "payload": payload}


async def ws_send_message(websocket: Any, message: dict[str, Any]) -> None:
    if hasattr(websocket, "send_json"):
        await websocket.send_json(message)
        return
    if hasattr(websocket, "send_text"):
        await websocket.send_text(json.dumps(message))
