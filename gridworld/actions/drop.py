"""DropEngine — deposits resources on pseudo-randomly chosen cells."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from gridworld.core.enums import Domain, ResourceKind
from gridworld.core.models import Vector2
from gridworld.systems.rng import EntropyContext

if TYPE_CHECKING:
    from gridworld.config import WorldConfig
    from gridworld.core.world_state import WorldState
    from gridworld.systems.rng import DrawStream, RandomSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Drop:
    kind: ResourceKind
    amount: int
    position: Vector2


# (tag, kind) for the four administrative reseed slots
SHUFFLE_SLOTS: tuple[tuple[int, ResourceKind], ...] = (
    (1, ResourceKind.TOKEN),
    (2, ResourceKind.TOKEN),
    (3, ResourceKind.HEALTH),
    (4, ResourceKind.HEALTH),
)


class DropEngine:
    """Single-draw drops: no collision retry, amounts stack on whatever the
    chosen cell already holds, occupied or not.
    """

    __slots__ = ("_rng",)

    def __init__(self, rng: RandomSource) -> None:
        self._rng = rng

    @staticmethod
    def drop(world: WorldState, kind: ResourceKind, amount: int, stream: DrawStream) -> Drop:
        if amount < 0:
            raise ValueError(f"drop amount must be >= 0, got {amount}")
        grid = world.grid
        pos = Vector2(stream.below(grid.width), stream.below(grid.height))
        grid.add_deposit(pos, kind, amount)
        logger.debug("Dropped %d %s at %s", amount, kind.name, pos)
        return Drop(kind=kind, amount=amount, position=pos)

    @staticmethod
    def shuffle_context(config: WorldConfig, seed_a: int, seed_b: int, tag: int) -> EntropyContext:
        """Slot positions depend on the two seeds and the slot tag only."""
        return EntropyContext(
            tick_hash=0,
            caller="",
            principal="",
            target=tag,
            system_id=config.system_id,
            domain=Domain.SHUFFLE,
            salt=f"{seed_a}:{seed_b}".encode(),
        )

    def shuffle(self, world: WorldState, seed_a: int, seed_b: int) -> list[Drop]:
        """Re-seed the four fixed slots with their configured amounts."""
        cfg = world.config
        amounts = {
            ResourceKind.TOKEN: cfg.shuffle_token_amount,
            ResourceKind.HEALTH: cfg.shuffle_health_amount,
        }
        drops: list[Drop] = []
        for tag, kind in SHUFFLE_SLOTS:
            stream = self._rng.stream(self.shuffle_context(cfg, seed_a, seed_b, tag))
            drops.append(self.drop(world, kind, amounts[kind], stream))
        return drops
