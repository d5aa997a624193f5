"""Engine layer: the serialized world machine."""

from gridworld.engine.world_machine import WorldMachine

__all__ = ["WorldMachine"]
