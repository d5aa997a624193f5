"""Thread-safe event log for world transitions exposed to observers."""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass, field
from typing import Any

from gridworld.core.enums import EventType


@dataclass(frozen=True, slots=True)
class WorldEvent:
    """A single state transition, enough to rebuild the world without
    re-querying every cell.
    """

    tick: int
    epoch: int
    category: EventType
    message: str
    player_ids: tuple[int, ...] = ()  # IDs of players involved in this event
    data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "tick": self.tick,
            "epoch": self.epoch,
            "category": self.category.name,
            "message": self.message,
            "player_ids": list(self.player_ids),
            "data": dict(self.data),
        }


class EventLog:
    """Unbounded event log. Writers append; readers snapshot a slice.

    All events are kept until manually cleared via ``clear()``.
    Thread-safe via a simple lock — reads are non-blocking copies.
    """

    __slots__ = ("_buffer", "_lock")

    def __init__(self) -> None:
        self._buffer: deque[WorldEvent] = deque()
        self._lock = threading.Lock()

    def append(self, event: WorldEvent) -> None:
        with self._lock:
            self._buffer.append(event)

    def since_tick(self, tick: int) -> list[WorldEvent]:
        """Return all events with tick >= *tick*."""
        with self._lock:
            return [e for e in self._buffer if e.tick >= tick]

    def latest(self, count: int = 50) -> list[WorldEvent]:
        """Return the *count* most recent events."""
        with self._lock:
            items = list(self._buffer)
        return items[-count:]

    def of_type(self, category: EventType) -> list[WorldEvent]:
        with self._lock:
            return [e for e in self._buffer if e.category == category]

    def __len__(self) -> int:
        with self._lock:
            return len(self._buffer)

    def clear(self) -> None:
        with self._lock:
            self._buffer.clear()
