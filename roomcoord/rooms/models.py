"""In-memory room domain models."""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from enum import Enum
from typing import Any


class RoomStatus(str, Enum):
    LOBBY = "lobby"
    PLAYING = "playing"


@dataclass(slots=True)
class Participant:
    """Room member state tracked in memory."""

    participant_id: str
    color: str
    ready: bool = False


@dataclass(slots=True)
class Room:
    """Room aggregate state.

    ``participants`` keeps join order, so the host is always the first key and
    succession after a departure needs no re-sorting.
    """

    room_id: str
    status: RoomStatus = RoomStatus.LOBBY
    participants: dict[str, Participant] = field(default_factory=dict)
    start_handle: Any = None
    start_token: int = 0
    rounds_started: int = 0

    @property
    def host_id(self) -> str | None:
        return next(iter(self.participants), None)

    @property
    def members(self) -> list[Participant]:
        return list(self.participants.values())

    @property
    def auto_start_pending(self) -> bool:
        return self.start_handle is not None

    def is_host(self, participant_id: str) -> bool:
        return participant_id == self.host_id

    def all_ready(self) -> bool:
        return bool(self.participants) and all(member.ready for member in self.participants.values())


__all__ = [
    "Participant",
    "Room",
    "RoomStatus",
]
