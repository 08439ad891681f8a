"""Room REST routes.

Routes are ``async def`` so they run on the event loop together with the
websocket handlers and never mutate a room from a worker thread.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter

import roomcoord.runtime as runtime
from roomcoord.api.errors import raise_api_error
from roomcoord.api.errors import raise_room_error
from roomcoord.api.room_views import room_detail
from roomcoord.api.room_views import room_summary
from roomcoord.core.room_ids import RoomIdValidationError
from roomcoord.core.room_ids import normalize_and_validate_room_id
from roomcoord.rooms.errors import RoomNotFoundError
from roomcoord.rooms.errors import RoomNotPlayingError

logger = logging.getLogger(__name__)

router = APIRouter()


def _validated_room_id(room_id: str) -> str:
    try:
        return normalize_and_validate_room_id(room_id)
    except RoomIdValidationError as exc:
        raise_api_error(
            status_code=400,
            code="ROOM_ID_INVALID",
            message=str(exc),
            detail={"room_id": room_id},
        )


@router.get("/api/rooms")
async def list_rooms() -> list[dict[str, object]]:
    """Return summaries of every live room."""
    return [room_summary(room) for room in runtime.room_manager.list_rooms()]


@router.get("/api/rooms/{room_id}")
async def get_room_detail(room_id: str) -> dict[str, object]:
    """Return one room detail."""
    room_id = _validated_room_id(room_id)
    try:
        room = runtime.room_manager.get_room(room_id)
    except RoomNotFoundError as exc:
        raise_room_error(404, exc)
    return room_detail(room)


@router.post("/api/rooms/{room_id}/end")
async def end_round(room_id: str) -> dict[str, object]:
    """Round-end signal from game logic: move the room back to its lobby."""
    room_id = _validated_room_id(room_id)
    try:
        room = runtime.room_manager.end_round(room_id)
    except RoomNotFoundError as exc:
        raise_room_error(404, exc)
    except RoomNotPlayingError as exc:
        raise_room_error(409, exc)
    logger.info("round end signalled for room %r", room_id)
    return room_detail(room)
