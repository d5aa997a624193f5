"""Interfaces of the external collaborators the world consults."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class OwnershipOracle(Protocol):
    """Authorizes player-scoped operations."""

    def owner_of(self, player_id: int) -> str | None: ...


@runtime_checkable
class HealthOracle(Protocol):
    """Authoritative store of per-player health."""

    def health_of(self, player_id: int) -> int: ...

    def increase_health(self, player_id: int, amount: int) -> None: ...

    def decrease_health(self, player_id: int, amount: int) -> None: ...


@runtime_checkable
class TokenLedger(Protocol):
    """Fungible resource ledger credited on token pickup."""

    def credit(self, identity: str, amount: int) -> None: ...


@runtime_checkable
class AdminGate(Protocol):
    """Restricts administrative operations to a privileged principal."""

    def require(self, caller: str) -> None: ...
