"""Room-domain errors raised by the room manager."""

from __future__ import annotations

from typing import Any


class RoomError(Exception):
    """Base class for room-domain errors."""

    code = "ROOM_ERROR"

    def __init__(self, message: str, **detail: Any) -> None:
        super().__init__(message)
        self.detail = detail


class RoomNotFoundError(RoomError):
    """Raised when no room with the given id currently exists."""

    code = "ROOM_NOT_FOUND"


class ParticipantNotFoundError(RoomError):
    """Raised when a participant id is not a member of any room."""

    code = "PARTICIPANT_NOT_FOUND"


class NotHostError(RoomError):
    """Raised when a host-only action comes from another participant."""

    code = "NOT_HOST"


class QuorumNotMetError(RoomError):
    """Raised when a start is requested with too few participants."""

    code = "QUORUM_NOT_MET"


class RoomNotInLobbyError(RoomError):
    """Raised when a lobby-only action arrives while a round is running."""

    code = "ROOM_NOT_IN_LOBBY"


class RoomNotPlayingError(RoomError):
    """Raised when a round-end signal arrives for a room that is not playing."""

    code = "ROOM_NOT_PLAYING"


__all__ = [
    "NotHostError",
    "ParticipantNotFoundError",
    "QuorumNotMetError",
    "RoomError",
    "RoomNotFoundError",
    "RoomNotInLobbyError",
    "RoomNotPlayingError",
]
