"""Shared fixtures for room coordinator tests."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import pytest

from roomcoord.rooms.manager import RoomManager
from roomcoord.rooms.registry import ConnectionRegistry
from roomcoord.ws.broadcast import BroadcastDispatcher


class ManualCall:
    """Delayed call driven by ManualScheduler.advance()."""

    def __init__(self, due: float, seq: int, callback: Callable[[], None]) -> None:
        self.due = due
        self.seq = seq
        self.callback = callback
        self.cancelled = False
        self.fired = False

    @property
    def active(self) -> bool:
        return not (self.cancelled or self.fired)

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Deterministic clock for grace-period tests."""

    def __init__(self) -> None:
        self.now = 0.0
        self.calls: list[ManualCall] = []

    def call_later(self, delay: float, callback: Callable[[], None]) -> ManualCall:
        call = ManualCall(self.now + delay, len(self.calls), callback)
        self.calls.append(call)
        return call

    @property
    def pending(self) -> int:
        return sum(1 for call in self.calls if call.active)

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while True:
            due = [call for call in self.calls if call.active and call.due <= target]
            if not due:
                break
            call = min(due, key=lambda item: (item.due, item.seq))
            self.now = call.due
            call.fired = True
            call.callback()
        self.now = target


@dataclass
class Coordinator:
    """Registry + dispatcher + room manager wired like the runtime, on a manual clock."""

    registry: ConnectionRegistry
    dispatcher: BroadcastDispatcher
    manager: RoomManager
    scheduler: ManualScheduler

    def connect(self, room_id: str = "r1") -> str:
        return self.registry.register(object(), room_id=room_id)

    def disconnect(self, participant_id: str) -> None:
        self.registry.unregister(participant_id)

    def messages(self, participant_id: str) -> list[dict[str, Any]]:
        connection = self.registry.get(participant_id)
        assert connection is not None, f"{participant_id} is not connected"
        return connection.outbox.drain()

    def types(self, participant_id: str) -> list[str]:
        return [message["type"] for message in self.messages(participant_id)]


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def coordinator(scheduler: ManualScheduler) -> Coordinator:
    registry = ConnectionRegistry()
    dispatcher = BroadcastDispatcher(registry)
    manager = RoomManager(dispatcher, scheduler, min_players=2, start_grace_seconds=3.0)
    registry.subscribe(manager)
    return Coordinator(registry=registry, dispatcher=dispatcher, manager=manager, scheduler=scheduler)
