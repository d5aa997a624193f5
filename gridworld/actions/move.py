"""MoveAction — validates and applies single-step moves.

A move costs ``health_cost_per_move`` health, and the player must hold
strictly more than that before moving.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from gridworld.actions.base import Collaborators, require_controller
from gridworld.core.enums import Direction
from gridworld.core.errors import InsufficientHealthError, OutOfBoundsError, PositionOccupiedError
from gridworld.core.models import Vector2

if TYPE_CHECKING:
    from gridworld.core.world_state import WorldState

logger = logging.getLogger(__name__)


class MoveAction:
    """Stateless handler for MOVE proposals."""

    @staticmethod
    def validate(
        world: WorldState,
        collab: Collaborators,
        player_id: int,
        caller: str,
        direction: Direction,
    ) -> Vector2:
        """Check every precondition in order and return the target cell."""
        require_controller(collab, player_id, caller)
        current = world.position_of(player_id)

        cost = world.config.health_cost_per_move
        health = collab.health.health_of(player_id)
        if health <= cost:
            logger.debug("Player %d too weak to move (health=%d, cost=%d)", player_id, health, cost)
            raise InsufficientHealthError(
                f"player {player_id} needs more than {cost} health to move, has {health}"
            )

        target = world.grid.step(current, direction)
        if target is None:
            logger.debug("Player %d blocked by edge moving %s from %s",
                         player_id, Direction(direction).name, current)
            raise OutOfBoundsError(f"moving {Direction(direction).name} from {current} leaves the grid")

        occupant = world.grid.get(target).occupant
        if occupant is not None:
            logger.debug("Player %d blocked by player %d at %s", player_id, occupant, target)
            raise PositionOccupiedError(f"{target} is occupied by player {occupant}")

        return target

    @staticmethod
    def apply(world: WorldState, collab: Collaborators, player_id: int, target: Vector2) -> int:
        """Charge the move cost, shift occupancy, and return the new health."""
        collab.health.decrease_health(player_id, world.config.health_cost_per_move)
        world.occupy(player_id, target)
        return collab.health.health_of(player_id)
