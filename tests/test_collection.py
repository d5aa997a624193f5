"""Tests for token and health collection.

Covers:
- Tokens credit the caller; health recharges the player; deposit zeroes
- Shared cooldown across both kinds, measured on the world timestamp
- An empty-cell attempt still consumes the cooldown window
- Health must be > 0; unauthorized and unplaced players are rejected
- Drop-on-collect re-drops the same kind and amount
"""

import sys
import os

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from gridworld.core.enums import EventType, ResourceKind
from gridworld.core.errors import (
    CooldownNotElapsedError,
    InsufficientHealthError,
    NotJoinedError,
    NothingToCollectError,
    UnauthorizedError,
)
from gridworld.core.models import Vector2
from tests.helpers.world_arena import WorldArena


def _seeded_arena(tokens: int = 0, health: int = 0, **overrides) -> tuple[WorldArena, int, Vector2]:
    arena = WorldArena(**overrides)
    pid = arena.add_player("alice", health=40)
    pos = arena.put(pid, 3, 3)
    if tokens:
        arena.world.grid.add_token_deposit(pos, tokens)
    if health:
        arena.world.grid.add_health_deposit(pos, health)
    return arena, pid, pos


class TestCollectTokens:
    def test_credits_caller_and_clears_cell(self):
        arena, pid, pos = _seeded_arena(tokens=500)
        assert arena.machine.collect_tokens("alice", pid) == 500
        assert arena.ledger.balance_of("alice") == 500
        assert arena.world.grid.get(pos).token_deposit == 0

    def test_event(self):
        arena, pid, pos = _seeded_arena(tokens=120)
        arena.machine.collect_tokens("alice", pid)
        event = arena.events(EventType.TOKENS_COLLECTED)[-1]
        assert event.player_ids == (pid,)
        assert event.data["caller"] == "alice"
        assert event.data["amount"] == 120

    def test_leaves_health_deposit_alone(self):
        arena, pid, pos = _seeded_arena(tokens=10, health=5)
        arena.machine.collect_tokens("alice", pid)
        assert arena.world.grid.get(pos).health_deposit == 5


class TestCollectHealth:
    def test_recharges_player(self):
        arena, pid, pos = _seeded_arena(health=25)
        assert arena.machine.collect_health("alice", pid) == 25
        assert arena.characters.health_of(pid) == 65
        assert arena.world.grid.get(pos).health_deposit == 0
        assert arena.ledger.total_supply == 0
        assert arena.events(EventType.HEALTH_COLLECTED)[-1].data["amount"] == 25


class TestCooldown:
    """Cooldown enforcement, shared by both collection kinds."""

    def test_second_attempt_within_interval_fails(self):
        arena, pid, pos = _seeded_arena(tokens=10, collect_interval=60)
        arena.machine.collect_tokens("alice", pid)
        arena.world.grid.add_token_deposit(pos, 10)
        arena.machine.advance_time(59)
        with pytest.raises(CooldownNotElapsedError):
            arena.machine.collect_tokens("alice", pid)

    def test_cooldown_shared_across_kinds(self):
        arena, pid, _ = _seeded_arena(tokens=10, health=10)
        arena.machine.collect_tokens("alice", pid)
        with pytest.raises(CooldownNotElapsedError):
            arena.machine.collect_health("alice", pid)

    def test_interval_elapsed_allows_again(self):
        arena, pid, pos = _seeded_arena(tokens=10, collect_interval=60)
        arena.machine.collect_tokens("alice", pid)
        arena.world.grid.add_token_deposit(pos, 7)
        arena.machine.advance_time(60)
        assert arena.machine.collect_tokens("alice", pid) == 7

    def test_advance_ticks_moves_timestamp(self):
        arena, pid, pos = _seeded_arena(tokens=10, collect_interval=24, seconds_per_tick=12)
        arena.machine.collect_tokens("alice", pid)
        arena.world.grid.add_token_deposit(pos, 3)
        arena.machine.advance(1)
        with pytest.raises(CooldownNotElapsedError):
            arena.machine.collect_tokens("alice", pid)
        arena.machine.advance(1)
        assert arena.machine.collect_tokens("alice", pid) == 3

    def test_empty_attempt_consumes_cooldown(self):
        arena, pid, pos = _seeded_arena()
        arena.machine.advance_time(500)
        with pytest.raises(NothingToCollectError):
            arena.machine.collect_tokens("alice", pid)
        assert arena.world.players[pid].last_collect_at == 500

        arena.world.grid.add_token_deposit(pos, 10)
        with pytest.raises(CooldownNotElapsedError):
            arena.machine.collect_tokens("alice", pid)
        assert arena.machine.cooldown_remaining(pid) == 60

    def test_cooldown_failure_does_not_restamp(self):
        arena, pid, pos = _seeded_arena(tokens=10)
        arena.machine.collect_tokens("alice", pid)
        arena.machine.advance_time(30)
        with pytest.raises(CooldownNotElapsedError):
            arena.machine.collect_tokens("alice", pid)
        assert arena.world.players[pid].last_collect_at == 0
        assert arena.machine.cooldown_remaining(pid) == 30


class TestGates:
    def test_zero_health_cannot_collect(self):
        arena, pid, _ = _seeded_arena(tokens=10)
        arena.characters.set_health(pid, 0)
        before = arena.machine.snapshot()
        with pytest.raises(InsufficientHealthError):
            arena.machine.collect_tokens("alice", pid)
        assert arena.machine.snapshot() == before

    def test_wrong_caller(self):
        arena, pid, _ = _seeded_arena(tokens=10)
        before = arena.machine.snapshot()
        with pytest.raises(UnauthorizedError):
            arena.machine.collect_tokens("bob", pid)
        assert arena.machine.snapshot() == before
        assert arena.ledger.balance_of("bob") == 0

    def test_unplaced_player(self):
        arena = WorldArena()
        pid = arena.mint("alice")
        with pytest.raises(NotJoinedError):
            arena.machine.collect_health("alice", pid)


class TestDropOnCollect:
    def test_tokens_redropped(self):
        arena, pid, pos = _seeded_arena(tokens=300, drop_on_collect=True)
        arena.machine.collect_tokens("alice", pid)
        assert arena.world.grid.total_deposit(ResourceKind.TOKEN) == 300
        drop = arena.events(EventType.RESOURCE_DROPPED)[-1]
        assert drop.data["kind"] == "TOKEN"
        assert drop.data["amount"] == 300
        dropped_at = Vector2(drop.data["x"], drop.data["y"])
        assert arena.world.grid.get(dropped_at).token_deposit >= 300

    def test_health_redropped(self):
        arena, pid, _ = _seeded_arena(health=30, drop_on_collect=True)
        arena.machine.collect_health("alice", pid)
        assert arena.world.grid.total_deposit(ResourceKind.HEALTH) == 30
        assert arena.world.grid.total_deposit(ResourceKind.TOKEN) == 0

    def test_no_redrop_when_disabled(self):
        arena, pid, _ = _seeded_arena(tokens=300, drop_on_collect=False)
        arena.machine.collect_tokens("alice", pid)
        assert arena.world.grid.total_deposit(ResourceKind.TOKEN) == 0
        assert arena.events(EventType.RESOURCE_DROPPED) == []
