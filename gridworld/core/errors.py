"""Rejection taxonomy for world operations.

Every precondition failure aborts the whole operation and surfaces as one of
these exceptions. ``code`` is a stable identifier used by the HTTP layer.
"""

from __future__ import annotations


class WorldError(Exception):
    """Base class for all rejected world operations."""

    code = "world_error"


class UnauthorizedError(WorldError):
    """Caller does not control the target player, or is not the admin."""

    code = "unauthorized"


class GameNotActiveError(WorldError):
    """Join attempted while the world gate is closed."""

    code = "game_not_active"


class CapacityExceededError(WorldError):
    """Roster is full, or no free cell remains."""

    code = "capacity_exceeded"


class OutOfBoundsError(WorldError):
    """Position outside the grid, including edge-wraparound attempts."""

    code = "out_of_bounds"


class PositionOccupiedError(WorldError):
    code = "position_occupied"


class InsufficientHealthError(WorldError):
    code = "insufficient_health"


class CooldownNotElapsedError(WorldError):
    code = "cooldown_not_elapsed"


class NothingToCollectError(WorldError):
    code = "nothing_to_collect"


class NotJoinedError(WorldError):
    """Player has no position in the current epoch."""

    code = "not_joined"


class InvalidConfigurationError(WorldError, ValueError):
    code = "invalid_configuration"
