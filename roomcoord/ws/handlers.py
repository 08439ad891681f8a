"""Routing of client->server room messages."""

from __future__ import annotations

from collections.abc import Callable
import json
import logging

import roomcoord.runtime as runtime
from roomcoord.rooms.errors import ParticipantNotFoundError
from roomcoord.rooms.errors import RoomError

from .protocol import CLIENT_READY
from .protocol import CLIENT_START_GAME

logger = logging.getLogger(__name__)


def _ready(participant_id: str) -> None:
    runtime.room_manager.toggle_ready(participant_id)


def _start_game(participant_id: str) -> None:
    runtime.room_manager.request_start(participant_id)


CLIENT_HANDLERS: dict[str, Callable[[str], None]] = {
    CLIENT_READY: _ready,
    CLIENT_START_GAME: _start_game,
}


def parse_client_message(message: str) -> str | None:
    """Return the message type, or None when the frame is not a typed JSON object."""
    try:
        payload = json.loads(message)
    except (ValueError, RecursionError):
        return None
    if not isinstance(payload, dict):
        return None
    message_type = payload.get("type")
    if not isinstance(message_type, str):
        return None
    return message_type


def handle_client_message(participant_id: str, message: str) -> None:
    """Apply one client message; rejected actions never touch room state."""
    message_type = parse_client_message(message)
    if message_type is None:
        logger.warning("dropping malformed message from %s: %.80r", participant_id, message)
        return

    handler = CLIENT_HANDLERS.get(message_type)
    if handler is None:
        logger.warning("dropping unknown message type %r from %s", message_type, participant_id)
        return

    try:
        handler(participant_id)
    except ParticipantNotFoundError:
        logger.info("dropping %r from unregistered participant %s", message_type, participant_id)
    except RoomError as exc:
        logger.info("rejected %r from %s: %s", message_type, participant_id, exc)
        runtime.dispatcher.send_error(participant_id, code=exc.code, message=str(exc), detail=exc.detail)
