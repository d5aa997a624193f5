"""Tests for world lifecycle and administration.

Covers:
- start/stop toggle the join gate and emit events; admin only
- restart clears roster, entries and occupancy; epoch strictly increases
- restart twice in a row is idempotent apart from the epoch
- configure validates and applies gameplay fields; dimensions are fixed
- the construction-time reset event
- clock operations: admin-only when a caller is named, forward only
- world seeds must fit in 64 bits
"""

import sys
import os

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from gridworld.config import WorldConfig
from gridworld.core.enums import EventType, ResourceKind
from gridworld.core.errors import CapacityExceededError, InvalidConfigurationError, UnauthorizedError
from gridworld.core.models import Vector2
from tests.helpers.world_arena import ADMIN, WorldArena


class TestStartStop:
    def test_gate_toggles(self):
        arena = WorldArena(start=False)
        assert not arena.world.active
        arena.machine.start(ADMIN)
        assert arena.world.active
        arena.machine.stop(ADMIN)
        assert not arena.world.active
        assert len(arena.events(EventType.GAME_STARTED)) == 1
        assert len(arena.events(EventType.GAME_ENDED)) == 1

    def test_admin_only(self):
        arena = WorldArena(start=False)
        with pytest.raises(UnauthorizedError):
            arena.machine.start("alice")
        assert not arena.world.active
        arena.machine.start(ADMIN)
        with pytest.raises(UnauthorizedError):
            arena.machine.stop("alice")
        assert arena.world.active


class TestRestart:
    def test_clears_everything_but_deposits(self):
        arena = WorldArena()
        pids = [arena.add_player(f"p{i}") for i in range(5)]
        arena.world.grid.add_token_deposit(Vector2(2, 2), 9)

        epoch = arena.machine.restart(ADMIN)

        assert epoch == 1
        assert arena.world.roster == []
        assert arena.world.players == {}
        assert list(arena.world.grid.occupied_cells()) == []
        assert arena.world.grid.get(Vector2(2, 2)).token_deposit == 9
        for pid in pids:
            assert arena.machine.snapshot().position_of(pid) is None

    def test_restart_twice(self):
        """Restart idempotence: empty both times, epoch strictly increasing."""
        arena = WorldArena()
        for i in range(3):
            arena.add_player(f"p{i}")
        first = arena.machine.restart(ADMIN)
        snap_first = arena.machine.snapshot()
        second = arena.machine.restart(ADMIN)
        snap_second = arena.machine.snapshot()

        assert second > first
        for snap in (snap_first, snap_second):
            assert snap.roster == ()
            assert all(occupant is None for occupant, _, _ in snap.fields)

    def test_reset_events(self):
        arena = WorldArena()
        arena.machine.advance(3)
        arena.machine.restart(ADMIN)
        resets = arena.events(EventType.WORLD_RESET)
        assert [e.data["epoch"] for e in resets] == [0, 1]
        assert resets[-1].data["width"] == 24
        assert resets[-1].data["height"] == 24
        assert arena.world.epoch_tick == 3

    def test_players_rejoin_after_restart(self):
        arena = WorldArena()
        pid = arena.add_player("alice")
        arena.machine.restart(ADMIN)
        pos = arena.machine.join("alice", pid)
        assert arena.world.roster == [pid]
        assert arena.world.grid.get(pos).occupant == pid
        assert arena.world.occupancy_violations() == []

    def test_restart_resets_cooldown(self):
        arena = WorldArena()
        pid = arena.add_player("alice")
        arena.world.grid.add_health_deposit(arena.position(pid), 5)
        arena.machine.collect_health("alice", pid)
        arena.machine.restart(ADMIN)
        pos = arena.machine.join("alice", pid)
        arena.world.grid.add_health_deposit(pos, 5)
        assert arena.machine.collect_health("alice", pid) == 5

    def test_admin_only(self):
        arena = WorldArena()
        arena.add_player("alice")
        with pytest.raises(UnauthorizedError):
            arena.machine.restart("alice")
        assert arena.world.epoch == 0
        assert len(arena.world.roster) == 1


class TestConfigure:
    def test_apply_gameplay_changes(self):
        arena = WorldArena()
        cfg = arena.machine.configure(ADMIN, collect_interval=5, health_cost_per_move=2,
                                      drop_on_collect=True)
        assert cfg.collect_interval == 5
        assert arena.machine.config.health_cost_per_move == 2
        assert arena.machine.config.drop_on_collect is True
        event = arena.events(EventType.CONFIG_CHANGED)[-1]
        assert event.data["collect_interval"] == 5

    def test_dimensions_fixed(self):
        arena = WorldArena()
        with pytest.raises(InvalidConfigurationError):
            arena.machine.configure(ADMIN, grid_width=30)
        assert arena.machine.config.grid_width == 24

    def test_invalid_values(self):
        arena = WorldArena()
        with pytest.raises(InvalidConfigurationError):
            arena.machine.configure(ADMIN, max_players=24 * 24)
        with pytest.raises(InvalidConfigurationError):
            arena.machine.configure(ADMIN, attrition_divider=0)
        with pytest.raises(InvalidConfigurationError):
            arena.machine.configure(ADMIN, not_a_field=1)

    def test_admin_only(self):
        arena = WorldArena()
        with pytest.raises(UnauthorizedError):
            arena.machine.configure("alice", collect_interval=0)

    def test_lowered_capacity_blocks_new_joins_only(self):
        arena = WorldArena()
        first = arena.add_player("alice")
        arena.add_player("bob")
        arena.machine.configure(ADMIN, max_players=1)
        arena.machine.join("alice", first)
        with pytest.raises(CapacityExceededError):
            arena.add_player("carol")


class TestConfigValidation:
    def test_defaults_are_valid(self):
        cfg = WorldConfig().validate()
        assert (cfg.grid_width, cfg.grid_height, cfg.max_players) == (24, 24, 50)

    def test_machine_rejects_bad_config(self):
        with pytest.raises(InvalidConfigurationError):
            WorldArena(grid_width=2, grid_height=2, max_players=4)

    def test_shuffle_amounts_configurable(self):
        arena = WorldArena(shuffle_token_amount=1, shuffle_health_amount=2)
        arena.machine.shuffle(ADMIN, 0, 0)
        assert arena.world.grid.total_deposit(ResourceKind.TOKEN) == 2
        assert arena.world.grid.total_deposit(ResourceKind.HEALTH) == 4


class TestClock:
    def test_admin_may_advance(self):
        arena = WorldArena()
        assert arena.machine.advance(2, caller=ADMIN) == 2
        assert arena.machine.advance_time(5, caller=ADMIN) == 2 * 12 + 5

    def test_named_non_admin_rejected(self):
        arena = WorldArena()
        before = arena.machine.snapshot()
        with pytest.raises(UnauthorizedError):
            arena.machine.advance(1, caller="alice")
        with pytest.raises(UnauthorizedError):
            arena.machine.advance_time(60, caller="alice")
        assert arena.machine.snapshot() == before

    def test_time_only_moves_forward(self):
        arena = WorldArena()
        with pytest.raises(ValueError):
            arena.machine.advance_time(-1)
        with pytest.raises(ValueError):
            arena.machine.advance(-1)
        assert (arena.world.tick, arena.world.timestamp) == (0, 0)


class TestSeedRange:
    @pytest.mark.parametrize("seed", [1 << 63, -(1 << 63) - 1, 1 << 70])
    def test_out_of_range_seed_rejected(self, seed):
        with pytest.raises(InvalidConfigurationError):
            WorldConfig(world_seed=seed).validate()

    @pytest.mark.parametrize("seed", [(1 << 63) - 1, -(1 << 63), 0])
    def test_edge_seeds_place_players(self, seed):
        arena = WorldArena(world_seed=seed)
        pid = arena.add_player("alice")
        assert arena.world.grid.get(arena.position(pid)).occupant == pid
