"""Replay serialization — records every submitted proposal for deterministic replay.

Rejected proposals are recorded too: a collection that fails after passing
its cooldown gate still stamps the cooldown, so replaying only the applied
proposals would not reproduce the world. Minted characters are recorded
in the header, since ownership and starting health live outside the world.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from gridworld.actions.base import ActionProposal
from gridworld.core.enums import ActionType, Direction

if TYPE_CHECKING:
    from gridworld.utils.event_log import WorldEvent

logger = logging.getLogger(__name__)

REPLAY_VERSION = "1.1"


def _encode_target(proposal: ActionProposal) -> Any:
    target = proposal.target
    if proposal.verb == ActionType.MOVE:
        return Direction(target).name
    if isinstance(target, tuple):
        return list(target)
    return target


def _decode_target(verb: ActionType, raw: Any) -> Any:
    if verb == ActionType.MOVE:
        return Direction[raw]
    if verb == ActionType.SHUFFLE:
        return tuple(raw)
    return raw


class ReplayRecorder:
    """Accumulates proposals with their outcome and flushes to a JSON file."""

    __slots__ = ("_path", "_seed", "_characters", "_entries")

    def __init__(self, path: str | Path, seed: int) -> None:
        self._path = Path(path)
        self._seed = seed
        self._characters: list[dict[str, Any]] = []
        self._entries: list[dict[str, Any]] = []

    def record_character(self, player_id: int, owner: str, health: int) -> None:
        """Note a minted character; characters live outside the world."""
        self._characters.append({"player": player_id, "owner": owner, "health": health})

    def record(
        self,
        tick: int,
        proposal: ActionProposal,
        events: list[WorldEvent],
        error: str | None = None,
    ) -> None:
        self._entries.append(
            {
                "tick": tick,
                "player": proposal.actor_id,
                "verb": proposal.verb.name,
                "caller": proposal.caller,
                "target": _encode_target(proposal),
                "error": error,
                "events": [e.category.name for e in events],
            }
        )

    @property
    def characters(self) -> list[dict[str, Any]]:
        return list(self._characters)

    @property
    def entries(self) -> list[dict[str, Any]]:
        return list(self._entries)

    def proposals(self) -> list[ActionProposal]:
        """Rebuild the recorded proposals in submission order."""
        return proposals_from_entries(self._entries)

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": REPLAY_VERSION,
            "seed": self._seed,
            "characters": self._characters,
            "total_proposals": len(self._entries),
            "proposals": self._entries,
        }

    def flush(self) -> None:
        """Write accumulated data to disk."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(self.to_dict(), indent=2), encoding="utf-8")
        logger.info("Replay saved to %s (%d proposals)", self._path, len(self._entries))


def proposals_from_entries(entries: list[dict[str, Any]]) -> list[ActionProposal]:
    proposals: list[ActionProposal] = []
    for raw in entries:
        verb = ActionType[raw["verb"]]
        proposals.append(
            ActionProposal(
                actor_id=raw["player"],
                verb=verb,
                caller=raw["caller"],
                target=_decode_target(verb, raw["target"]),
            )
        )
    return proposals


def load_replay(path: str | Path) -> tuple[int, list[dict[str, Any]], list[ActionProposal]]:
    """Return ``(seed, characters, proposals)`` from a replay file."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if data.get("version") != REPLAY_VERSION:
        raise ValueError(f"unsupported replay version {data.get('version')!r}")
    return data["seed"], data["characters"], proposals_from_entries(data["proposals"])
