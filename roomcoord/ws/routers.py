"""WebSocket route handlers for room channels."""

from __future__ import annotations

import asyncio

from fastapi import APIRouter
from fastapi import WebSocket

import roomcoord.runtime as runtime
from roomcoord.core.room_ids import RoomIdValidationError
from roomcoord.core.room_ids import normalize_and_validate_room_id

from .heartbeat import ws_message_loop
from .outbox import Outbox
from .outbox import pump_outbox
from .protocol import CLOSE_INVALID_ROOM_ID

router = APIRouter()


@router.websocket("/ws")
async def ws_default_room(websocket: WebSocket) -> None:
    """Default room websocket for single-room deployments."""
    await ws_room(websocket, room_id=runtime.settings.roomcoord_default_room_id)


@router.websocket("/ws/rooms/{room_id}")
async def ws_room(websocket: WebSocket, room_id: str) -> None:
    """Room websocket: register + init + lobby updates until disconnect."""
    try:
        room_id = normalize_and_validate_room_id(room_id)
    except RoomIdValidationError:
        await websocket.accept()
        await websocket.close(code=CLOSE_INVALID_ROOM_ID, reason="ROOM_ID_INVALID")
        return

    await websocket.accept()
    registry = runtime.connection_registry
    settings = runtime.settings
    outbox = Outbox()
    participant_id = registry.register(websocket, room_id=room_id, outbox=outbox)
    sender_task = asyncio.create_task(pump_outbox(websocket, outbox))
    try:
        await ws_message_loop(
            websocket,
            participant_id=participant_id,
            outbox=outbox,
            interval_seconds=settings.roomcoord_heartbeat_interval_seconds,
            pong_timeout_seconds=settings.roomcoord_heartbeat_pong_timeout_seconds,
            max_missed_pongs=settings.roomcoord_heartbeat_max_missed_pongs,
        )
    finally:
        registry.unregister(participant_id)
        outbox.close()
        await sender_task
