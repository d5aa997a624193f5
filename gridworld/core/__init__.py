"""Core data models and world representation."""

from gridworld.core.enums import ActionType, Direction, Domain, EventType, ResourceKind
from gridworld.core.models import Field, PlayerEntry, Vector2
from gridworld.core.grid import Grid
from gridworld.core.world_state import WorldState
from gridworld.core.snapshot import Snapshot

__all__ = [
    "ActionType",
    "Direction",
    "Domain",
    "EventType",
    "Field",
    "Grid",
    "PlayerEntry",
    "ResourceKind",
    "Snapshot",
    "Vector2",
    "WorldState",
]
