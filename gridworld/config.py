"""World configuration with sensible defaults."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace

from gridworld.core.errors import InvalidConfigurationError

# Fields the administrative configure() call may change at runtime.
# Grid dimensions are fixed at construction.
MUTABLE_FIELDS: frozenset[str] = frozenset({
    "collect_interval",
    "drop_on_collect",
    "attrition_divider",
    "health_cost_per_move",
    "max_players",
})


@dataclass(frozen=True)
class WorldConfig:
    """Immutable configuration for one world instance."""

    # World
    world_seed: int = 42
    grid_width: int = 24
    grid_height: int = 24
    system_id: str = "gridworld"

    # Clock
    seconds_per_tick: int = 12

    # Roster
    max_players: int = 50
    starting_health: int = 100     # health given to freshly minted characters

    # Gameplay gates
    collect_interval: int = 60     # seconds between collections, shared by both kinds
    health_cost_per_move: int = 1
    attrition_divider: int = 10
    drop_on_collect: bool = True

    # Administrative reseed
    shuffle_token_amount: int = 500
    shuffle_health_amount: int = 50

    # Administration
    admin: str = "admin"

    # Logging
    log_level: str = "INFO"
    replay_file: str = "replay.json"

    def validate(self) -> WorldConfig:
        """Raise InvalidConfigurationError if the values cannot run a world."""
        if not -(1 << 63) <= self.world_seed < (1 << 63):
            raise InvalidConfigurationError(f"world_seed must fit in 64 bits, got {self.world_seed}")
        if self.grid_width <= 0 or self.grid_height <= 0:
            raise InvalidConfigurationError(
                f"grid must be at least 1x1, got {self.grid_width}x{self.grid_height}"
            )
        if self.grid_width > 0xFFFF or self.grid_height > 0xFFFF:
            raise InvalidConfigurationError("grid dimensions must fit in 16 bits")
        # Placement relies on at least one free cell with a full roster.
        if not 0 < self.max_players < self.cell_count:
            raise InvalidConfigurationError(
                f"max_players must be in 1..{self.cell_count - 1}, got {self.max_players}"
            )
        if self.collect_interval < 0:
            raise InvalidConfigurationError("collect_interval must be >= 0")
        if self.health_cost_per_move < 0:
            raise InvalidConfigurationError("health_cost_per_move must be >= 0")
        if self.attrition_divider <= 0:
            raise InvalidConfigurationError("attrition_divider must be > 0")
        if self.seconds_per_tick <= 0:
            raise InvalidConfigurationError("seconds_per_tick must be > 0")
        if self.shuffle_token_amount < 0 or self.shuffle_health_amount < 0:
            raise InvalidConfigurationError("shuffle amounts must be >= 0")
        return self

    @property
    def cell_count(self) -> int:
        return self.grid_width * self.grid_height

    def with_changes(self, **changes: object) -> WorldConfig:
        """Return a validated copy with *changes* applied.

        Only the gameplay fields in MUTABLE_FIELDS may change.
        """
        known = {f.name for f in fields(self)}
        for name in changes:
            if name not in known:
                raise InvalidConfigurationError(f"unknown configuration field {name!r}")
            if name not in MUTABLE_FIELDS:
                raise InvalidConfigurationError(f"{name!r} is fixed at construction")
        return replace(self, **changes).validate()
