"""Fan-out of room state changes to the room's live connections."""

from __future__ import annotations

from collections.abc import Iterable
import logging
from typing import Any

from roomcoord.api.room_views import room_detail
from roomcoord.rooms.models import Room
from roomcoord.rooms.registry import ConnectionRegistry

from .protocol import EVENT_ERROR
from .protocol import EVENT_GAME_END
from .protocol import EVENT_GAME_START
from .protocol import EVENT_INIT
from .protocol import EVENT_LOBBY_UPDATE
from .protocol import EVENT_PLAYER_JOINED
from .protocol import EVENT_PLAYER_LEFT
from .protocol import ws_event

logger = logging.getLogger(__name__)


class BroadcastDispatcher:
    """Enqueue room events onto each member's outbox.

    Every call enqueues synchronously, so all recipients of one room see the
    same relative order. Members whose connection is already gone are
    skipped; nothing is kept for them.
    """

    def __init__(self, registry: ConnectionRegistry) -> None:
        self._registry = registry

    def send_init(self, room: Room, participant_id: str) -> None:
        member = room.participants[participant_id]
        self._send(
            participant_id,
            ws_event(
                EVENT_INIT,
                {
                    "participant_id": participant_id,
                    "room_id": room.room_id,
                    "color": member.color,
                    "is_host": room.is_host(participant_id),
                },
            ),
        )

    def send_error(self, participant_id: str, *, code: str, message: str, detail: dict[str, Any]) -> None:
        self._send(participant_id, ws_event(EVENT_ERROR, {"code": code, "message": message, "detail": detail}))

    def broadcast_lobby_state(self, room: Room) -> None:
        self._broadcast(room, ws_event(EVENT_LOBBY_UPDATE, {"room": room_detail(room)}))

    def broadcast_player_joined(self, room: Room, participant_id: str) -> None:
        member = room.participants[participant_id]
        message = ws_event(EVENT_PLAYER_JOINED, {"participant_id": participant_id, "color": member.color})
        self._broadcast(room, message, exclude={participant_id})

    def broadcast_player_left(self, room: Room, participant_id: str) -> None:
        self._broadcast(room, ws_event(EVENT_PLAYER_LEFT, {"participant_id": participant_id}))

    def broadcast_start(self, room: Room, *, trigger: str) -> None:
        payload = {"room_id": room.room_id, "round": room.rounds_started, "trigger": trigger}
        self._broadcast(room, ws_event(EVENT_GAME_START, payload))

    def broadcast_end(self, room: Room, *, reason: str) -> None:
        self._broadcast(room, ws_event(EVENT_GAME_END, {"room_id": room.room_id, "reason": reason}))

    def _broadcast(self, room: Room, message: dict[str, Any], exclude: Iterable[str] = ()) -> None:
        skipped = set(exclude)
        for participant_id in room.participants:
            if participant_id in skipped:
                continue
            self._send(participant_id, message)

    def _send(self, participant_id: str, message: dict[str, Any]) -> None:
        connection = self._registry.get(participant_id)
        if connection is None:
            logger.debug("skip %s for departed participant %s", message["type"], participant_id)
            return
        connection.outbox.put(message)
