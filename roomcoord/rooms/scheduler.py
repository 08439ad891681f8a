"""Cancellable delayed calls used for the grace-period auto-start."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Protocol


class ScheduledCall(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall: ...


class AsyncioScheduler:
    """Schedule callbacks on the running event loop.

    ``asyncio.TimerHandle.cancel`` is idempotent, and a cancelled handle never
    runs its callback.
    """

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        loop = asyncio.get_running_loop()
        return loop.call_later(delay, callback)
