"""Room domain package: connection registry, room models and lobby state machine."""

from roomcoord.rooms.errors import NotHostError
from roomcoord.rooms.errors import ParticipantNotFoundError
from roomcoord.rooms.errors import QuorumNotMetError
from roomcoord.rooms.errors import RoomError
from roomcoord.rooms.errors import RoomNotFoundError
from roomcoord.rooms.errors import RoomNotInLobbyError
from roomcoord.rooms.errors import RoomNotPlayingError
from roomcoord.rooms.manager import RoomManager
from roomcoord.rooms.models import Participant
from roomcoord.rooms.models import Room
from roomcoord.rooms.models import RoomStatus
from roomcoord.rooms.registry import Connection
from roomcoord.rooms.registry import ConnectionRegistry
from roomcoord.rooms.scheduler import AsyncioScheduler

__all__ = [
    "AsyncioScheduler",
    "Connection",
    "ConnectionRegistry",
    "NotHostError",
    "Participant",
    "ParticipantNotFoundError",
    "QuorumNotMetError",
    "Room",
    "RoomError",
    "RoomManager",
    "RoomNotFoundError",
    "RoomNotInLobbyError",
    "RoomNotPlayingError",
    "RoomStatus",
]
