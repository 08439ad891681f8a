"""Connection registry: maps live transports to participant identities."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
import logging
from typing import Any
from typing import Protocol
import uuid

from roomcoord.core.colors import ColorCycler
from roomcoord.ws.outbox import Outbox

logger = logging.getLogger(__name__)

ParticipantId = str


@dataclass(slots=True)
class Connection:
    """One registered transport and the identity assigned to it."""

    participant_id: ParticipantId
    room_id: str
    color: str
    transport: Any
    outbox: Outbox


class RegistryListener(Protocol):
    def participant_registered(self, connection: Connection) -> None: ...

    def participant_unregistered(self, connection: Connection) -> None: ...


class ConnectionRegistry:
    """Process-wide registry shared by every room."""

    def __init__(self, colors: ColorCycler | None = None) -> None:
        self._connections: dict[ParticipantId, Connection] = {}
        self._listeners: list[RegistryListener] = []
        self._colors = colors or ColorCycler()

    def __contains__(self, participant_id: object) -> bool:
        return participant_id in self._connections

    def __len__(self) -> int:
        return len(self._connections)

    def __iter__(self) -> Iterator[Connection]:
        return iter(list(self._connections.values()))

    def subscribe(self, listener: RegistryListener) -> None:
        self._listeners.append(listener)

    def get(self, participant_id: ParticipantId) -> Connection | None:
        return self._connections.get(participant_id)

    def register(self, transport: Any, *, room_id: str, outbox: Outbox | None = None) -> ParticipantId:
        """Assign a fresh identity and color, then let listeners seat the participant."""
        participant_id = self._new_participant_id()
        connection = Connection(
            participant_id=participant_id,
            room_id=room_id,
            color=self._colors.next_color(),
            transport=transport,
            outbox=outbox or Outbox(),
        )
        self._connections[participant_id] = connection
        logger.info("participant %s connected to room %r", participant_id, room_id)
        for listener in list(self._listeners):
            listener.participant_registered(connection)
        return participant_id

    def unregister(self, participant_id: ParticipantId) -> None:
        """Drop the mapping; unknown ids are ignored."""
        connection = self._connections.pop(participant_id, None)
        if connection is None:
            return
        connection.outbox.close()
        logger.info("participant %s disconnected from room %r", participant_id, connection.room_id)
        for listener in list(self._listeners):
            listener.participant_unregistered(connection)

    def close_all(self) -> None:
        """Close every outbound queue without touching room membership."""
        for connection in self:
            connection.outbox.close()

    def _new_participant_id(self) -> ParticipantId:
        participant_id = uuid.uuid4().hex
        while participant_id in self._connections:
            participant_id = uuid.uuid4().hex
        return participant_id


__all__ = [
    "Connection",
    "ConnectionRegistry",
    "ParticipantId",
    "RegistryListener",
]
