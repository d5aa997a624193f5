"""Immutable snapshot of the world state for readers and comparisons."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from gridworld.core.grid import Grid
from gridworld.core.models import PlayerEntry, Vector2
from gridworld.core.world_state import WorldState


@dataclass(frozen=True, slots=True, eq=False)
class Snapshot:
    """Read-only view of the world, safe to share across threads.

    Holds copied field values and copied player entries behind a MappingProxyType.
    Two snapshots compare equal iff the observable world state is identical.
    """

    tick: int
    timestamp: int
    epoch: int
    epoch_tick: int
    active: bool
    roster: tuple[int, ...]
    players: Mapping[int, PlayerEntry]
    fields: tuple[tuple[int | None, int, int], ...]
    width: int
    height: int

    @classmethod
    def from_world(cls, world: WorldState) -> Snapshot:
        grid: Grid = world.grid
        return cls(
            tick=world.tick,
            timestamp=world.timestamp,
            epoch=world.epoch,
            epoch_tick=world.epoch_tick,
            active=world.active,
            roster=tuple(world.roster),
            players=MappingProxyType({pid: e.copy() for pid, e in world.players.items()}),
            fields=tuple((f.occupant, f.token_deposit, f.health_deposit) for _, f in grid.cells()),
            width=grid.width,
            height=grid.height,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Snapshot):
            return NotImplemented
        return (
            self.tick == other.tick
            and self.timestamp == other.timestamp
            and self.epoch == other.epoch
            and self.epoch_tick == other.epoch_tick
            and self.active == other.active
            and self.roster == other.roster
            and dict(self.players) == dict(other.players)
            and self.fields == other.fields
        )

    def field_at(self, x: int, y: int) -> tuple[int | None, int, int]:
        return self.fields[y * self.width + x]

    def position_of(self, player_id: int) -> Vector2 | None:
        entry = self.players.get(player_id)
        return entry.position if entry else None
