"""Tests for DropEngine and the administrative shuffle.

Covers:
- Single-draw drops stack onto existing deposits, even occupied cells
- Shuffle reseeds two token and two health slots with the configured amounts
- Shuffle positions depend only on the seed pair
- Shuffle is admin only
"""

import sys
import os

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from gridworld.actions.drop import SHUFFLE_SLOTS, DropEngine
from gridworld.config import WorldConfig
from gridworld.core.enums import EventType, ResourceKind
from gridworld.core.errors import UnauthorizedError
from gridworld.core.models import Vector2
from gridworld.core.world_state import WorldState
from gridworld.systems.rng import DigestRandomSource, DrawStream
from tests.helpers.world_arena import ADMIN, WorldArena


class _FixedStream:
    """Stream stub yielding a scripted sequence of draws."""

    def __init__(self, *values: int) -> None:
        self._values = list(values)

    def below(self, n: int) -> int:
        return self._values.pop(0) % n


class TestDrop:
    def test_drop_uses_one_draw_pair(self):
        world = WorldState(WorldConfig())
        stream = DrawStream(b"drop")
        drop = DropEngine.drop(world, ResourceKind.TOKEN, 40, stream)
        assert stream.consumed == 2
        assert world.grid.get(drop.position).token_deposit == 40

    def test_drop_stacks(self):
        world = WorldState(WorldConfig())
        DropEngine.drop(world, ResourceKind.HEALTH, 5, _FixedStream(2, 3))
        DropEngine.drop(world, ResourceKind.HEALTH, 7, _FixedStream(2, 3))
        assert world.grid.get(Vector2(2, 3)).health_deposit == 12

    def test_drop_lands_on_occupied_cell(self):
        world = WorldState(WorldConfig())
        world.occupy(9, Vector2(1, 1))
        drop = DropEngine.drop(world, ResourceKind.TOKEN, 10, _FixedStream(1, 1))
        assert drop.position == Vector2(1, 1)
        assert world.grid.get(Vector2(1, 1)).occupant == 9
        assert world.grid.get(Vector2(1, 1)).token_deposit == 10

    def test_negative_amount_rejected(self):
        world = WorldState(WorldConfig())
        with pytest.raises(ValueError):
            DropEngine.drop(world, ResourceKind.TOKEN, -1, _FixedStream(0, 0))


class TestShuffle:
    def test_four_slots_with_fixed_amounts(self):
        arena = WorldArena(shuffle_token_amount=500, shuffle_health_amount=50)
        drops = arena.machine.shuffle(ADMIN, 11, 22)
        assert [d.kind for d in drops] == [kind for _, kind in SHUFFLE_SLOTS]
        assert [d.amount for d in drops] == [500, 500, 50, 50]
        assert arena.world.grid.total_deposit(ResourceKind.TOKEN) == 1000
        assert arena.world.grid.total_deposit(ResourceKind.HEALTH) == 100
        assert len(arena.events(EventType.RESOURCE_DROPPED)) == 4

    def test_positions_depend_only_on_seeds(self):
        a = WorldArena(world_seed=1)
        b = WorldArena(world_seed=2)
        b.machine.advance(5)
        b.add_player("someone")
        pos_a = [d.position for d in a.machine.shuffle(ADMIN, 7, 8)]
        pos_b = [d.position for d in b.machine.shuffle(ADMIN, 7, 8)]
        assert pos_a == pos_b

    def test_different_seeds_move_slots(self):
        arena = WorldArena()
        first = [d.position for d in arena.machine.shuffle(ADMIN, 1, 2)]
        second = [d.position for d in arena.machine.shuffle(ADMIN, 3, 4)]
        assert first != second

    def test_repeat_shuffle_stacks(self):
        arena = WorldArena()
        drops = arena.machine.shuffle(ADMIN, 5, 5)
        arena.machine.shuffle(ADMIN, 5, 5)
        pos = drops[0].position
        expected = sum(d.amount for d in drops if d.position == pos and d.kind == ResourceKind.TOKEN)
        assert arena.world.grid.get(pos).token_deposit == 2 * expected

    def test_engine_matches_machine(self):
        cfg = WorldConfig()
        world = WorldState(cfg)
        engine = DropEngine(DigestRandomSource(cfg.world_seed))
        direct = [d.position for d in engine.shuffle(world, 9, 10)]
        arena = WorldArena()
        via_machine = [d.position for d in arena.machine.shuffle(ADMIN, 9, 10)]
        assert direct == via_machine

    def test_admin_only(self):
        arena = WorldArena()
        before = arena.machine.snapshot()
        with pytest.raises(UnauthorizedError):
            arena.machine.shuffle("alice", 1, 2)
        assert arena.machine.snapshot() == before
