"""Grid of fields: occupancy and per-cell resource deposits."""

from __future__ import annotations

from typing import Iterator

from gridworld.core.enums import Direction, ResourceKind
from gridworld.core.errors import OutOfBoundsError
from gridworld.core.models import DIRECTION_OFFSETS, Field, Vector2


class Grid:
    """W x H field matrix backed by a flat list for cache-friendly access.

    Every accessor bounds-checks its position and raises OutOfBoundsError;
    nothing is clamped. The grid does no cross-entity validation, that is
    the engines' job.
    """

    __slots__ = ("width", "height", "_fields")

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"grid must be at least 1x1, got {width}x{height}")
        self.width = width
        self.height = height
        self._fields: list[Field] = [Field() for _ in range(width * height)]

    # -- access --

    def _idx(self, pos: Vector2) -> int:
        if not self.in_bounds(pos):
            raise OutOfBoundsError(f"{pos} is outside the {self.width}x{self.height} grid")
        return pos.y * self.width + pos.x

    def in_bounds(self, pos: Vector2) -> bool:
        return 0 <= pos.x < self.width and 0 <= pos.y < self.height

    def get(self, pos: Vector2) -> Field:
        return self._fields[self._idx(pos)]

    def step(self, pos: Vector2, direction: Direction) -> Vector2 | None:
        """Return the neighbour of *pos* in *direction*, or None past an edge.

        The arithmetic is checked: stepping left from x=0 never wraps to the
        opposite edge.
        """
        target = pos + DIRECTION_OFFSETS[Direction(direction)]
        if not self.in_bounds(target):
            return None
        return target

    # -- occupancy --

    def set_occupant(self, pos: Vector2, player_id: int | None) -> None:
        self._fields[self._idx(pos)].occupant = player_id

    def is_occupied(self, pos: Vector2) -> bool:
        return self._fields[self._idx(pos)].occupant is not None

    # -- deposits --

    def add_token_deposit(self, pos: Vector2, amount: int) -> None:
        if amount < 0:
            raise ValueError(f"deposit amount must be >= 0, got {amount}")
        self._fields[self._idx(pos)].token_deposit += amount

    def clear_token_deposit(self, pos: Vector2) -> None:
        self._fields[self._idx(pos)].token_deposit = 0

    def add_health_deposit(self, pos: Vector2, amount: int) -> None:
        if amount < 0:
            raise ValueError(f"deposit amount must be >= 0, got {amount}")
        self._fields[self._idx(pos)].health_deposit += amount

    def clear_health_deposit(self, pos: Vector2) -> None:
        self._fields[self._idx(pos)].health_deposit = 0

    def deposit(self, pos: Vector2, kind: ResourceKind) -> int:
        return self.get(pos).deposit(kind)

    def add_deposit(self, pos: Vector2, kind: ResourceKind, amount: int) -> None:
        if kind == ResourceKind.TOKEN:
            self.add_token_deposit(pos, amount)
        else:
            self.add_health_deposit(pos, amount)

    def clear_deposit(self, pos: Vector2, kind: ResourceKind) -> None:
        if kind == ResourceKind.TOKEN:
            self.clear_token_deposit(pos)
        else:
            self.clear_health_deposit(pos)

    def total_deposit(self, kind: ResourceKind) -> int:
        return sum(f.deposit(kind) for f in self._fields)

    # -- iteration --

    def cells(self) -> Iterator[tuple[Vector2, Field]]:
        """Yield ``(position, field)`` in row-major order."""
        w = self.width
        for i, f in enumerate(self._fields):
            yield Vector2(i % w, i // w), f

    def occupied_cells(self) -> Iterator[tuple[Vector2, int]]:
        for pos, f in self.cells():
            if f.occupant is not None:
                yield pos, f.occupant

    # -- copy --

    def copy(self) -> Grid:
        new = Grid.__new__(Grid)
        new.width = self.width
        new.height = self.height
        new._fields = [f.copy() for f in self._fields]
        return new
