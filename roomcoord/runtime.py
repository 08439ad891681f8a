"""Process-wide runtime state shared by REST and WebSocket handlers."""

from __future__ import annotations

import logging

from roomcoord.core.config import Settings
from roomcoord.core.config import load_settings
from roomcoord.core.log_config import configure_logging
from roomcoord.rooms.manager import RoomManager
from roomcoord.rooms.registry import ConnectionRegistry
from roomcoord.rooms.scheduler import AsyncioScheduler
from roomcoord.ws.broadcast import BroadcastDispatcher

logger = logging.getLogger(__name__)


def build_coordinator(settings: Settings) -> tuple[ConnectionRegistry, BroadcastDispatcher, RoomManager]:
    """Wire registry -> room manager -> dispatcher for one process."""
    registry = ConnectionRegistry()
    dispatcher = BroadcastDispatcher(registry)
    manager = RoomManager(
        dispatcher,
        AsyncioScheduler(),
        min_players=settings.roomcoord_min_players,
        start_grace_seconds=settings.roomcoord_start_grace_seconds,
    )
    registry.subscribe(manager)
    return registry, dispatcher, manager


settings = load_settings()
connection_registry, dispatcher, room_manager = build_coordinator(settings)


def startup() -> None:
    """Reload settings and reset in-memory registry/room state."""
    global settings, connection_registry, dispatcher, room_manager
    settings = load_settings()
    configure_logging(settings.roomcoord_log_level)
    connection_registry, dispatcher, room_manager = build_coordinator(settings)
    logger.info(
        "room coordinator ready (env=%s, quorum=%d, grace=%.1fs)",
        settings.roomcoord_app_env,
        settings.roomcoord_min_players,
        settings.roomcoord_start_grace_seconds,
    )


def shutdown() -> None:
    """Cancel pending starts and release every outbound queue."""
    room_manager.shutdown()
    connection_registry.close_all()
    logger.info("room coordinator stopped")


__all__ = [
    "Settings",
    "build_coordinator",
    "connection_registry",
    "dispatcher",
    "room_manager",
    "settings",
    "shutdown",
    "startup",
]
