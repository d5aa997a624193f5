"""Engine systems: entropy and draw streams."""

from gridworld.systems.rng import (
    DigestRandomSource,
    DrawStream,
    EntropyContext,
    RandomSource,
    SystemRandomSource,
)

__all__ = ["DigestRandomSource", "DrawStream", "EntropyContext", "RandomSource", "SystemRandomSource"]
