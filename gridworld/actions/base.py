"""Base action proposal — the universal currency between callers and the world."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from gridworld.collaborators.base import HealthOracle, OwnershipOracle, TokenLedger
from gridworld.core.enums import ActionType
from gridworld.core.errors import UnauthorizedError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ActionProposal:
    """One operation submitted by *caller*.

    ``actor_id`` is the target player for player-scoped verbs and 0 for
    administrative ones. ``target`` carries the verb's argument (a Direction,
    a seed pair, a config mapping, a tick count).
    """

    actor_id: int
    verb: ActionType
    caller: str = ""
    target: Any = None

    def __repr__(self) -> str:
        return (f"Proposal(player={self.actor_id}, {self.verb.name}, caller={self.caller!r}, "
                f"target={self.target!r})")


@dataclass(frozen=True, slots=True)
class Collaborators:
    """External services the engines consult."""

    owners: OwnershipOracle
    health: HealthOracle
    ledger: TokenLedger


def require_controller(collab: Collaborators, player_id: int, caller: str) -> None:
    """Raise UnauthorizedError unless *caller* owns *player_id*."""
    owner = collab.owners.owner_of(player_id)
    if owner is None or owner != caller:
        logger.debug("Caller %r does not control player %d (owner=%r)", caller, player_id, owner)
        raise UnauthorizedError(f"{caller!r} does not control player {player_id}")
