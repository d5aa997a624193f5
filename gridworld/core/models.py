"""Core data models: Vector2, Field, PlayerEntry."""

from __future__ import annotations

from dataclasses import dataclass

from gridworld.core.enums import Direction, ResourceKind


@dataclass(frozen=True, slots=True)
class Vector2:
    """Immutable 2D integer coordinate."""

    x: int = 0
    y: int = 0

    def __add__(self, other: Vector2) -> Vector2:
        return Vector2(self.x + other.x, self.y + other.y)

    def as_tuple(self) -> tuple[int, int]:
        return (self.x, self.y)

    def __repr__(self) -> str:
        return f"({self.x}, {self.y})"


DIRECTION_OFFSETS: dict[Direction, Vector2] = {
    Direction.UP: Vector2(0, -1),
    Direction.DOWN: Vector2(0, 1),
    Direction.LEFT: Vector2(-1, 0),
    Direction.RIGHT: Vector2(1, 0),
}


@dataclass(slots=True)
class Field:
    """One grid cell: its occupant and its resource deposits."""

    occupant: int | None = None
    token_deposit: int = 0
    health_deposit: int = 0

    @property
    def occupied(self) -> bool:
        return self.occupant is not None

    def deposit(self, kind: ResourceKind) -> int:
        if kind == ResourceKind.TOKEN:
            return self.token_deposit
        return self.health_deposit

    def copy(self) -> Field:
        return Field(self.occupant, self.token_deposit, self.health_deposit)


@dataclass(slots=True)
class PlayerEntry:
    """Per-player bookkeeping owned by the world.

    ``position`` is None until the player is placed in the current epoch;
    ``last_collect_at`` is None until the first collection attempt that
    passes the cooldown gate.
    """

    position: Vector2 | None = None
    last_collect_at: int | None = None

    @property
    def placed(self) -> bool:
        return self.position is not None

    def copy(self) -> PlayerEntry:
        return PlayerEntry(self.position, self.last_collect_at)
