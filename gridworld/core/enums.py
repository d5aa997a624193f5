"""Enumerations used throughout the engine."""

from __future__ import annotations

from enum import IntEnum, unique


@unique
class ActionType(IntEnum):
    """Operations a caller can submit to the world."""

    JOIN = 0
    MOVE = 1
    COLLECT_TOKENS = 2
    COLLECT_HEALTH = 3
    START = 4
    STOP = 5
    RESTART = 6
    SHUFFLE = 7
    CONFIGURE = 8
    ADVANCE = 9
    ADVANCE_TIME = 10


@unique
class Direction(IntEnum):
    """Single-step movement directions. UP decreases y."""

    UP = 0
    DOWN = 1
    LEFT = 2
    RIGHT = 3


@unique
class Domain(IntEnum):
    """RNG domains for deterministic randomness isolation."""

    PLACEMENT = 0
    DROP = 1
    SHUFFLE = 2


@unique
class ResourceKind(IntEnum):
    """Deposit kinds a cell can hold."""

    TOKEN = 0
    HEALTH = 1


@unique
class EventType(IntEnum):
    """Observable state transitions."""

    WORLD_RESET = 0
    PLAYER_REGISTERED = 1
    PLAYER_PLACED = 2
    PLAYER_MOVED = 3
    GAME_STARTED = 4
    GAME_ENDED = 5
    TOKENS_COLLECTED = 6
    HEALTH_COLLECTED = 7
    RESOURCE_DROPPED = 8
    CONFIG_CHANGED = 9
