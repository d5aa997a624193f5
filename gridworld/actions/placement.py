"""PlacementEngine — finds a free cell for a joining or relocating player."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from gridworld.core.errors import CapacityExceededError
from gridworld.core.models import Vector2

if TYPE_CHECKING:
    from gridworld.core.world_state import WorldState
    from gridworld.systems.rng import DrawStream

logger = logging.getLogger(__name__)


class PlacementEngine:
    """Probes random cells until one is free.

    Each probe draws x then y from the stream. The stream extends itself, so
    the probe loop alone could run indefinitely on an unlucky digest chain;
    after ``PROBE_FACTOR * W * H`` probes the engine switches to a row-major
    scan starting just after the last probe, which always terminates.
    """

    PROBE_FACTOR = 4

    @classmethod
    def find_free_cell(cls, world: WorldState, stream: DrawStream) -> Vector2:
        grid = world.grid
        w, h = grid.width, grid.height
        last = Vector2(0, 0)
        for _ in range(cls.PROBE_FACTOR * w * h):
            last = Vector2(stream.below(w), stream.below(h))
            if not grid.is_occupied(last):
                return last

        logger.debug("Probe budget exhausted after %d draws; scanning from %s",
                     stream.consumed, last)
        total = w * h
        start = last.y * w + last.x
        for i in range(1, total + 1):
            idx = (start + i) % total
            pos = Vector2(idx % w, idx // w)
            if not grid.is_occupied(pos):
                return pos
        raise CapacityExceededError("no free cell left on the grid")

    @classmethod
    def place(cls, world: WorldState, player_id: int, stream: DrawStream) -> Vector2:
        """Move *player_id* to a fresh free cell and return it.

        A player that already has a position has its old cell cleared; one
        that has never been placed clears nothing.
        """
        pos = cls.find_free_cell(world, stream)
        previous = world.occupy(player_id, pos)
        logger.debug("Placed player %d at %s (from %s, %d draws)",
                     player_id, pos, previous, stream.consumed)
        return pos
