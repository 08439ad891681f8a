"""WebSocket heartbeat and message-loop utilities."""

from __future__ import annotations

import asyncio
from datetime import datetime
from datetime import timezone
import json
import logging
from typing import Any

from .handlers import handle_client_message
from .outbox import Outbox
from .protocol import CLOSE_HEARTBEAT_TIMEOUT
from .protocol import EVENT_PING
from .protocol import EVENT_PONG
from .protocol import ws_event

logger = logging.getLogger(__name__)


class HeartbeatState:
    """Track one websocket heartbeat ping/pong lifecycle."""

    def __init__(self) -> None:
        self.last_ping_at: float | None = None
        self.last_pong_at: float | None = None
        self.missed_pong_count = 0
        self._awaiting_pong = False
        self._pong_event = asyncio.Event()

    def mark_ping_sent(self) -> None:
        self.last_ping_at = datetime.now(timezone.utc).timestamp()
        self._awaiting_pong = True
        self._pong_event.clear()

    def mark_pong_received(self) -> None:
        self.last_pong_at = datetime.now(timezone.utc).timestamp()
        if not self._awaiting_pong:
            return
        self._awaiting_pong = False
        self.missed_pong_count = 0
        self._pong_event.set()

    async def wait_for_pong(self, *, timeout_seconds: float) -> bool:
        if not self._awaiting_pong:
            return True
        try:
            await asyncio.wait_for(self._pong_event.wait(), timeout=timeout_seconds)
        except TimeoutError:
            self._awaiting_pong = False
            self.missed_pong_count += 1
            return False
        return True


def is_pong_message(message: str) -> bool:
    if message == EVENT_PONG:
        return True
    try:
        payload = json.loads(message)
    except (ValueError, RecursionError):
        return False
    if not isinstance(payload, dict):
        return False
    return payload.get("type") == EVENT_PONG


def handle_ws_message(*, participant_id: str, outbox: Outbox, heartbeat_state: HeartbeatState, message: str) -> None:
    if message == EVENT_PING:
        outbox.put(ws_event(EVENT_PONG, {}))
        return
    if is_pong_message(message):
        heartbeat_state.mark_pong_received()
        return
    handle_client_message(participant_id, message)


async def heartbeat_loop(
    websocket: Any,
    outbox: Outbox,
    *,
    heartbeat_state: HeartbeatState,
    interval_seconds: float = 30.0,
    pong_timeout_seconds: float = 10.0,
    max_missed_pongs: int = 2,
) -> None:
    sleep_after_probe = max(interval_seconds - pong_timeout_seconds, 0.0)
    while True:
        outbox.put(ws_event(EVENT_PING, {}))
        heartbeat_state.mark_ping_sent()
        pong_received = await heartbeat_state.wait_for_pong(timeout_seconds=pong_timeout_seconds)
        if (not pong_received) and heartbeat_state.missed_pong_count >= max_missed_pongs:
            logger.info("closing connection after %d missed pongs", heartbeat_state.missed_pong_count)
            await websocket.close(code=CLOSE_HEARTBEAT_TIMEOUT, reason="HEARTBEAT_TIMEOUT")
            return
        if sleep_after_probe > 0:
            await asyncio.sleep(sleep_after_probe)


async def ws_message_loop(
    websocket: Any,
    *,
    participant_id: str,
    outbox: Outbox,
    interval_seconds: float = 30.0,
    pong_timeout_seconds: float = 10.0,
    max_missed_pongs: int = 2,
) -> None:
    heartbeat_state = HeartbeatState()
    heartbeat_task = asyncio.create_task(
        heartbeat_loop(
            websocket,
            outbox,
            heartbeat_state=heartbeat_state,
            interval_seconds=interval_seconds,
            pong_timeout_seconds=pong_timeout_seconds,
            max_missed_pongs=max_missed_pongs,
        )
    )
    try:
        while True:
            frame = await websocket.receive()
            if frame["type"] == "websocket.disconnect":
                return
            message = frame.get("text")
            if message is None:
                logger.warning("dropping non-text frame from %s", participant_id)
                continue
            handle_ws_message(
                participant_id=participant_id,
                outbox=outbox,
                heartbeat_state=heartbeat_state,
                message=message,
            )
    finally:
        heartbeat_task.cancel()
        try:
            await heartbeat_task
        except asyncio.CancelledError:
            pass
