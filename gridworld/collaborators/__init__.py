"""External collaborators: interfaces and in-memory reference implementations."""

from gridworld.collaborators.admin import SingleAdminGate
from gridworld.collaborators.base import AdminGate, HealthOracle, OwnershipOracle, TokenLedger
from gridworld.collaborators.characters import Character, CharacterStore
from gridworld.collaborators.tokens import InMemoryTokenLedger

__all__ = [
    "AdminGate",
    "Character",
    "CharacterStore",
    "HealthOracle",
    "InMemoryTokenLedger",
    "OwnershipOracle",
    "SingleAdminGate",
    "TokenLedger",
]
