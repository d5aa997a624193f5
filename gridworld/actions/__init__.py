"""Action system: proposals, validation, and execution."""

from gridworld.actions.base import ActionProposal, Collaborators
from gridworld.actions.collect import CollectAction
from gridworld.actions.drop import Drop, DropEngine
from gridworld.actions.move import MoveAction
from gridworld.actions.placement import PlacementEngine

__all__ = [
    "ActionProposal",
    "CollectAction",
    "Collaborators",
    "Drop",
    "DropEngine",
    "MoveAction",
    "PlacementEngine",
]
