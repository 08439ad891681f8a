"""Per-connection outbound message queue."""

from __future__ import annotations

import asyncio
from collections import deque
import logging
from typing import Any

from .protocol import ws_send_message

logger = logging.getLogger(__name__)


class Outbox:
    """FIFO of server->client messages for one connection.

    Producers enqueue synchronously while mutating room state, so the order a
    recipient observes equals the order the messages were generated. One
    sender task drains the queue onto the socket.
    """

    def __init__(self) -> None:
        self._messages: deque[dict[str, Any]] = deque()
        self._wakeup = asyncio.Event()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def put(self, message: dict[str, Any]) -> bool:
        if self._closed:
            return False
        self._messages.append(message)
        self._wakeup.set()
        return True

    def close(self) -> None:
        self._closed = True
        self._wakeup.set()

    def drain(self) -> list[dict[str, Any]]:
        """Pop and return every queued message."""
        messages = list(self._messages)
        self._messages.clear()
        return messages

    async def get(self) -> dict[str, Any] | None:
        """Wait for the next message; ``None`` once closed and empty."""
        while True:
            if self._messages:
                return self._messages.popleft()
            if self._closed:
                return None
            self._wakeup.clear()
            await self._wakeup.wait()


async def pump_outbox(websocket: Any, outbox: Outbox) -> None:
    """Send queued messages until the outbox closes or the socket fails."""
    while True:
        message = await outbox.get()
        if message is None:
            return
        try:
            await ws_send_message(websocket, message)
        except Exception:
            logger.debug("send failed, stopping outbound pump", exc_info=True)
            outbox.close()
            return
