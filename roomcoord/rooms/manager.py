"""Room manager: owns every room and drives its lobby/playing cycle.

All mutations are plain synchronous methods. Callers run them on the single
event loop (websocket handlers, timer callbacks, async REST routes), so the
mutations of one room never interleave and need no locking.
"""

from __future__ import annotations

from functools import partial
import itertools
import logging
from typing import Any
from typing import Protocol

from roomcoord.rooms.errors import NotHostError
from roomcoord.rooms.errors import ParticipantNotFoundError
from roomcoord.rooms.errors import QuorumNotMetError
from roomcoord.rooms.errors import RoomNotFoundError
from roomcoord.rooms.errors import RoomNotInLobbyError
from roomcoord.rooms.errors import RoomNotPlayingError
from roomcoord.rooms.models import Participant
from roomcoord.rooms.models import Room
from roomcoord.rooms.models import RoomStatus
from roomcoord.rooms.scheduler import Scheduler

logger = logging.getLogger(__name__)

DEFAULT_MIN_PLAYERS = 2
DEFAULT_START_GRACE_SECONDS = 3.0

END_REASON_ROUND_OVER = "round_over"
END_REASON_INSUFFICIENT_PLAYERS = "insufficient_players"


class RoomEvents(Protocol):
    def send_init(self, room: Room, participant_id: str) -> None: ...

    def broadcast_lobby_state(self, room: Room) -> None: ...

    def broadcast_player_joined(self, room: Room, participant_id: str) -> None: ...

    def broadcast_player_left(self, room: Room, participant_id: str) -> None: ...

    def broadcast_start(self, room: Room, *, trigger: str) -> None: ...

    def broadcast_end(self, room: Room, *, reason: str) -> None: ...


class RoomManager:
    """Rooms indexed by id; created on first join, dropped when empty."""

    def __init__(
        self,
        events: RoomEvents,
        scheduler: Scheduler,
        *,
        min_players: int = DEFAULT_MIN_PLAYERS,
        start_grace_seconds: float = DEFAULT_START_GRACE_SECONDS,
    ) -> None:
        if min_players < 2:
            raise ValueError("min_players must be >= 2")
        if start_grace_seconds < 0:
            raise ValueError("start_grace_seconds must be >= 0")

        self._events = events
        self._scheduler = scheduler
        self._min_players = min_players
        self._start_grace_seconds = start_grace_seconds
        self._rooms: dict[str, Room] = {}
        self._participant_room: dict[str, str] = {}
        self._start_tokens = itertools.count(1)

    @property
    def min_players(self) -> int:
        return self._min_players

    # Connection registry hooks.

    def participant_registered(self, connection: Any) -> None:
        self.join(connection.room_id, connection.participant_id, connection.color)

    def participant_unregistered(self, connection: Any) -> None:
        self.leave(connection.room_id, connection.participant_id)

    # Queries.

    def get_room(self, room_id: str) -> Room:
        """Return a live room by id."""
        room = self._rooms.get(room_id)
        if room is None:
            raise RoomNotFoundError(f"room_id={room_id!r} not found", room_id=room_id)
        return room

    def find_room(self, room_id: str) -> Room | None:
        return self._rooms.get(room_id)

    def find_room_id(self, participant_id: str) -> str | None:
        """Return the room a participant sits in, or None."""
        return self._participant_room.get(participant_id)

    def list_rooms(self) -> list[Room]:
        """Return all live rooms sorted by room_id."""
        return [self._rooms[room_id] for room_id in sorted(self._rooms)]

    # Membership.

    def join(self, room_id: str, participant_id: str, color: str) -> Room:
        """Seat a participant as not ready; the room is created on first join."""
        current_room_id = self._participant_room.get(participant_id)
        if current_room_id is not None:
            return self._rooms[current_room_id]

        room = self._rooms.get(room_id)
        if room is None:
            room = Room(room_id=room_id)
            self._rooms[room_id] = room
            logger.info("room %r created", room_id)

        room.participants[participant_id] = Participant(
            participant_id=participant_id,
            color=color,
            ready=False,
        )
        self._participant_room[participant_id] = room_id

        self._events.send_init(room, participant_id)
        self._events.broadcast_player_joined(room, participant_id)
        self._sync_auto_start(room)
        self._events.broadcast_lobby_state(room)
        return room

    def leave(self, room_id: str, participant_id: str) -> Room | None:
        """Remove a participant; unknown ids leave everything untouched."""
        if self._participant_room.get(participant_id) != room_id:
            return self._rooms.get(room_id)

        room = self._rooms[room_id]
        was_host = room.is_host(participant_id)
        del room.participants[participant_id]
        del self._participant_room[participant_id]

        if not room.participants:
            self._cancel_auto_start(room)
            del self._rooms[room_id]
            logger.info("room %r is empty and was removed", room_id)
            return None

        if was_host:
            logger.info("host of room %r moved to %s", room_id, room.host_id)

        self._events.broadcast_player_left(room, participant_id)
        if room.status is RoomStatus.PLAYING and len(room.participants) < self._min_players:
            self._finish_round(room, reason=END_REASON_INSUFFICIENT_PLAYERS)
        # Readiness of the departed member no longer counts; a still-unanimous
        # room restarts the full grace period.
        self._sync_auto_start(room, restart=True)
        self._events.broadcast_lobby_state(room)
        return room

    # Participant actions.

    def toggle_ready(self, participant_id: str) -> Room:
        """Flip one readiness flag while the room is in the lobby."""
        room = self._room_of(participant_id)
        if room.status is not RoomStatus.LOBBY:
            raise RoomNotInLobbyError(
                f"room_id={room.room_id!r} status={room.status.value} does not allow ready updates",
                room_id=room.room_id,
            )

        member = room.participants[participant_id]
        member.ready = not member.ready
        logger.debug("participant %s ready=%s in room %r", participant_id, member.ready, room.room_id)
        self._sync_auto_start(room)
        self._events.broadcast_lobby_state(room)
        return room

    def request_start(self, participant_id: str) -> Room:
        """Host-only immediate start; needs quorum but not readiness."""
        room = self._room_of(participant_id)
        if room.status is not RoomStatus.LOBBY:
            raise RoomNotInLobbyError(f"room_id={room.room_id!r} is already playing", room_id=room.room_id)
        if not room.is_host(participant_id):
            raise NotHostError(
                "only the host can start the game",
                room_id=room.room_id,
                host_id=room.host_id,
            )
        if len(room.participants) < self._min_players:
            raise QuorumNotMetError(
                f"need at least {self._min_players} participants to start",
                room_id=room.room_id,
                player_count=len(room.participants),
                min_players=self._min_players,
            )

        self._begin_round(room, trigger="manual")
        return room

    def end_round(self, room_id: str) -> Room:
        """Round-end signal from game logic: return the room to the lobby."""
        room = self.get_room(room_id)
        if room.status is not RoomStatus.PLAYING:
            raise RoomNotPlayingError(f"room_id={room_id!r} is not playing", room_id=room_id)

        self._finish_round(room, reason=END_REASON_ROUND_OVER)
        self._sync_auto_start(room)
        self._events.broadcast_lobby_state(room)
        return room

    def shutdown(self) -> None:
        """Cancel every pending auto-start."""
        for room in self._rooms.values():
            self._cancel_auto_start(room)

    # State machine internals.

    def _room_of(self, participant_id: str) -> Room:
        room_id = self._participant_room.get(participant_id)
        if room_id is None:
            raise ParticipantNotFoundError(
                f"participant_id={participant_id!r} is not in any room",
                participant_id=participant_id,
            )
        return self._rooms[room_id]

    def _can_auto_start(self, room: Room) -> bool:
        return (
            room.status is RoomStatus.LOBBY
            and len(room.participants) >= self._min_players
            and room.all_ready()
        )

    def _sync_auto_start(self, room: Room, *, restart: bool = False) -> None:
        if restart:
            self._cancel_auto_start(room)
        if not self._can_auto_start(room):
            self._cancel_auto_start(room)
            return
        if room.start_handle is not None:
            return

        token = next(self._start_tokens)
        room.start_token = token
        room.start_handle = self._scheduler.call_later(
            self._start_grace_seconds,
            partial(self._fire_auto_start, room.room_id, token),
        )
        logger.info("room %r all ready, starting in %.1fs", room.room_id, self._start_grace_seconds)

    def _cancel_auto_start(self, room: Room) -> None:
        handle = room.start_handle
        if handle is None:
            return
        handle.cancel()
        room.start_handle = None
        logger.info("pending start of room %r cancelled", room.room_id)

    def _fire_auto_start(self, room_id: str, token: int) -> None:
        room = self._rooms.get(room_id)
        if room is None or room.start_handle is None or room.start_token != token:
            return
        room.start_handle = None
        if not self._can_auto_start(room):
            return
        self._begin_round(room, trigger="auto")

    def _begin_round(self, room: Room, *, trigger: str) -> None:
        self._cancel_auto_start(room)
        room.status = RoomStatus.PLAYING
        room.rounds_started += 1
        for member in room.participants.values():
            member.ready = False
        logger.info("room %r round %d started (%s)", room.room_id, room.rounds_started, trigger)
        self._events.broadcast_start(room, trigger=trigger)
        self._events.broadcast_lobby_state(room)

    def _finish_round(self, room: Room, *, reason: str) -> None:
        room.status = RoomStatus.LOBBY
        for member in room.participants.values():
            member.ready = False
        logger.info("room %r round %d ended (%s)", room.room_id, room.rounds_started, reason)
        self._events.broadcast_end(room, reason=reason)


__all__ = [
    "DEFAULT_MIN_PLAYERS",
    "DEFAULT_START_GRACE_SECONDS",
    "END_REASON_INSUFFICIENT_PLAYERS",
    "END_REASON_ROUND_OVER",
    "RoomEvents",
    "RoomManager",
]
