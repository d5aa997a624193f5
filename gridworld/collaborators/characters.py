"""In-memory character store: ownership and health per player id."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Character:
    """One minted player entity."""

    player_id: int
    owner: str
    health: int


class CharacterStore:
    """Reference implementation of both OwnershipOracle and HealthOracle.

    Ids are allocated sequentially from 1. Health never drops below zero.
    """

    __slots__ = ("_characters", "_next_id", "_lock")

    def __init__(self) -> None:
        self._characters: dict[int, Character] = {}
        self._next_id: int = 1
        self._lock = threading.Lock()

    def mint(self, owner: str, health: int) -> int:
        if health < 0:
            raise ValueError(f"health must be >= 0, got {health}")
        with self._lock:
            pid = self._next_id
            self._next_id += 1
            self._characters[pid] = Character(player_id=pid, owner=owner, health=health)
        logger.debug("Minted player %d for %s (health=%d)", pid, owner, health)
        return pid

    def transfer(self, player_id: int, new_owner: str) -> None:
        with self._lock:
            self._get(player_id).owner = new_owner

    def get(self, player_id: int) -> Character | None:
        return self._characters.get(player_id)

    def __len__(self) -> int:
        return len(self._characters)

    def _get(self, player_id: int) -> Character:
        character = self._characters.get(player_id)
        if character is None:
            raise KeyError(f"unknown player {player_id}")
        return character

    # -- OwnershipOracle --

    def owner_of(self, player_id: int) -> str | None:
        character = self._characters.get(player_id)
        return character.owner if character else None

    # -- HealthOracle --

    def health_of(self, player_id: int) -> int:
        character = self._characters.get(player_id)
        return character.health if character else 0

    def increase_health(self, player_id: int, amount: int) -> None:
        if amount < 0:
            raise ValueError(f"amount must be >= 0, got {amount}")
        with self._lock:
            self._get(player_id).health += amount

    def decrease_health(self, player_id: int, amount: int) -> None:
        if amount < 0:
            raise ValueError(f"amount must be >= 0, got {amount}")
        with self._lock:
            character = self._get(player_id)
            character.health = max(0, character.health - amount)

    def set_health(self, player_id: int, health: int) -> None:
        with self._lock:
            self._get(player_id).health = max(0, health)
