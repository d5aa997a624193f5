"""Single-principal administrative gate."""

from __future__ import annotations

from gridworld.core.errors import UnauthorizedError


class SingleAdminGate:
    __slots__ = ("admin",)

    def __init__(self, admin: str) -> None:
        self.admin = admin

    def require(self, caller: str) -> None:
        if caller != self.admin:
            raise UnauthorizedError(f"{caller!r} is not the administrator")
