"""CollectAction — picks up the deposit under a player.

Tokens and health share one cooldown per player. Once the cooldown gate
passes, the attempt is stamped even if the cell turns out to be empty.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from gridworld.actions.base import Collaborators, require_controller
from gridworld.core.enums import ResourceKind
from gridworld.core.errors import (
    CooldownNotElapsedError,
    InsufficientHealthError,
    NothingToCollectError,
)
from gridworld.core.models import Vector2

if TYPE_CHECKING:
    from gridworld.core.world_state import WorldState

logger = logging.getLogger(__name__)


class CollectAction:
    """Stateless handler for COLLECT_TOKENS / COLLECT_HEALTH proposals."""

    @staticmethod
    def cooldown_remaining(world: WorldState, player_id: int) -> int:
        entry = world.players.get(player_id)
        if entry is None or entry.last_collect_at is None:
            return 0
        elapsed = world.timestamp - entry.last_collect_at
        return max(0, world.config.collect_interval - elapsed)

    @classmethod
    def validate(
        cls,
        world: WorldState,
        collab: Collaborators,
        player_id: int,
        caller: str,
    ) -> Vector2:
        """Run the side-effect-free gates and return the player's cell."""
        require_controller(collab, player_id, caller)
        pos = world.position_of(player_id)

        if collab.health.health_of(player_id) <= 0:
            raise InsufficientHealthError(f"player {player_id} has no health left")

        remaining = cls.cooldown_remaining(world, player_id)
        if remaining > 0:
            logger.debug("Player %d collect on cooldown (%ds left)", player_id, remaining)
            raise CooldownNotElapsedError(
                f"player {player_id} must wait {remaining}s before collecting again"
            )
        return pos

    @staticmethod
    def apply(
        world: WorldState,
        collab: Collaborators,
        player_id: int,
        caller: str,
        pos: Vector2,
        kind: ResourceKind,
    ) -> int:
        """Stamp the cooldown, then take the deposit. Returns the amount taken."""
        world.entry(player_id).last_collect_at = world.timestamp

        amount = world.grid.deposit(pos, kind)
        if amount == 0:
            logger.debug("Player %d found no %s at %s", player_id, kind.name, pos)
            raise NothingToCollectError(f"no {kind.name.lower()} deposit at {pos}")

        if kind == ResourceKind.TOKEN:
            collab.ledger.credit(caller, amount)
        else:
            collab.health.increase_health(player_id, amount)
        world.grid.clear_deposit(pos, kind)
        return amount
