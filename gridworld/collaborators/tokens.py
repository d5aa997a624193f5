"""In-memory fungible token ledger."""

from __future__ import annotations

import threading
from collections import defaultdict


class InMemoryTokenLedger:
    """Balances per identity; ``credit`` mints new supply."""

    __slots__ = ("_balances", "_supply", "_lock")

    def __init__(self) -> None:
        self._balances: defaultdict[str, int] = defaultdict(int)
        self._supply: int = 0
        self._lock = threading.Lock()

    def credit(self, identity: str, amount: int) -> None:
        if amount < 0:
            raise ValueError(f"amount must be >= 0, got {amount}")
        with self._lock:
            self._balances[identity] += amount
            self._supply += amount

    def balance_of(self, identity: str) -> int:
        return self._balances.get(identity, 0)

    @property
    def total_supply(self) -> int:
        return self._supply
