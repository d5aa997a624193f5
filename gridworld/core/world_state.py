"""Mutable authoritative world state — only mutated by the WorldMachine."""

from __future__ import annotations

from typing import TYPE_CHECKING

from gridworld.core.errors import NotJoinedError
from gridworld.core.grid import Grid
from gridworld.core.models import PlayerEntry, Vector2

if TYPE_CHECKING:
    from gridworld.config import WorldConfig


class WorldState:
    """The single source of truth for one world.

    Owns the grid, the roster (ordered active player ids) and the player
    entries. Grid occupancy and entry positions always form a bijection;
    ``occupy``/``vacate`` are the only methods that touch either side.
    """

    __slots__ = (
        "config",
        "grid",
        "roster",
        "players",
        "epoch",
        "epoch_tick",
        "active",
        "tick",
        "timestamp",
        "nonce",
    )

    def __init__(self, config: WorldConfig) -> None:
        self.config: WorldConfig = config
        self.grid: Grid = Grid(config.grid_width, config.grid_height)
        self.roster: list[int] = []
        self.players: dict[int, PlayerEntry] = {}
        self.epoch: int = 0
        self.epoch_tick: int = 0
        self.active: bool = False
        self.tick: int = 0
        self.timestamp: int = 0
        self.nonce: int = 0

    # -- registry --

    def entry(self, player_id: int) -> PlayerEntry:
        """Return the entry for *player_id*, creating an empty one if needed."""
        entry = self.players.get(player_id)
        if entry is None:
            entry = PlayerEntry()
            self.players[player_id] = entry
        return entry

    def position_of(self, player_id: int) -> Vector2:
        entry = self.players.get(player_id)
        if entry is None or entry.position is None:
            raise NotJoinedError(f"player {player_id} has no position in epoch {self.epoch}")
        return entry.position

    def in_roster(self, player_id: int) -> bool:
        return player_id in self.roster

    # -- occupancy (both sides of the bijection move together) --

    def occupy(self, player_id: int, pos: Vector2) -> Vector2 | None:
        """Move *player_id* onto *pos*; return its previous position, if any."""
        entry = self.entry(player_id)
        previous = entry.position
        # bounds check on the target before anything changes
        self.grid.get(pos)
        if previous is not None:
            self.grid.set_occupant(previous, None)
        self.grid.set_occupant(pos, player_id)
        entry.position = pos
        return previous

    def vacate(self, player_id: int) -> None:
        """Remove *player_id* from the grid and zero its entry."""
        entry = self.players.pop(player_id, None)
        if entry is not None and entry.position is not None:
            if self.grid.get(entry.position).occupant == player_id:
                self.grid.set_occupant(entry.position, None)

    # -- entropy bookkeeping --

    def next_nonce(self) -> int:
        nonce = self.nonce
        self.nonce += 1
        return nonce

    # -- invariants --

    def occupancy_violations(self) -> list[str]:
        """Return a description of every break in the occupancy bijection."""
        problems: list[str] = []
        seen: set[int] = set()
        for pos, pid in self.grid.occupied_cells():
            if pid in seen:
                problems.append(f"player {pid} occupies more than one cell")
            seen.add(pid)
            entry = self.players.get(pid)
            if entry is None or entry.position != pos:
                problems.append(f"cell {pos} names player {pid} but its entry says "
                                f"{entry.position if entry else None}")
        for pid, entry in self.players.items():
            if entry.position is None:
                continue
            if self.grid.get(entry.position).occupant != pid:
                problems.append(f"player {pid} at {entry.position} is not the cell's occupant")
        return problems
