"""Room view builders used by REST and WS responses."""

from __future__ import annotations

from roomcoord.rooms.models import Participant
from roomcoord.rooms.models import Room


def room_summary(room: Room) -> dict[str, object]:
    return {
        "room_id": room.room_id,
        "status": room.status.value,
        "host_id": room.host_id,
        "player_count": len(room.participants),
        "ready_count": sum(1 for member in room.members if member.ready),
    }


def participant_detail(room: Room, member: Participant) -> dict[str, object]:
    return {
        "participant_id": member.participant_id,
        "color": member.color,
        "ready": member.ready,
        "is_host": room.is_host(member.participant_id),
    }


def room_detail(room: Room) -> dict[str, object]:
    return {
        "room_id": room.room_id,
        "status": room.status.value,
        "host_id": room.host_id,
        "members": [participant_detail(room, member) for member in room.members],
        "auto_start_pending": room.auto_start_pending,
        "rounds_started": room.rounds_started,
    }
