"""WorldMachine — the authoritative, serialized entry point to a world.

Every public operation builds an ActionProposal and goes through ``apply``,
which holds one re-entrant lock over the whole WorldState for the duration
of the operation. Operations either complete or raise a WorldError with the
world untouched; the one exception is the cooldown stamp of a collection
that passed its cooldown gate but found an empty cell.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any, Mapping

from gridworld.actions.base import ActionProposal, Collaborators, require_controller
from gridworld.actions.collect import CollectAction
from gridworld.actions.drop import Drop, DropEngine
from gridworld.actions.move import MoveAction
from gridworld.actions.placement import PlacementEngine
from gridworld.core.enums import ActionType, Direction, Domain, EventType, ResourceKind
from gridworld.core.errors import CapacityExceededError, GameNotActiveError, WorldError
from gridworld.core.models import Vector2
from gridworld.core.snapshot import Snapshot
from gridworld.core.world_state import WorldState
from gridworld.systems.rng import DigestRandomSource, DrawStream, EntropyContext
from gridworld.utils.event_log import EventLog, WorldEvent

if TYPE_CHECKING:
    from gridworld.collaborators.base import AdminGate
    from gridworld.config import WorldConfig
    from gridworld.systems.rng import RandomSource
    from gridworld.utils.replay import ReplayRecorder

logger = logging.getLogger(__name__)

_COLLECT_EVENTS = {
    ResourceKind.TOKEN: EventType.TOKENS_COLLECTED,
    ResourceKind.HEALTH: EventType.HEALTH_COLLECTED,
}


class WorldMachine:
    """Owns one WorldState and applies operations to it one at a time."""

    __slots__ = (
        "_world",
        "_collab",
        "_admin",
        "_rng",
        "_drops",
        "_event_log",
        "_recorder",
        "_lock",
        "_pending",
    )

    def __init__(
        self,
        config: WorldConfig,
        collaborators: Collaborators,
        admin: AdminGate,
        rng: RandomSource | None = None,
        event_log: EventLog | None = None,
        recorder: ReplayRecorder | None = None,
    ) -> None:
        self._world = WorldState(config.validate())
        self._collab = collaborators
        self._admin = admin
        self._rng: RandomSource = rng if rng is not None else DigestRandomSource(config.world_seed)
        self._drops = DropEngine(self._rng)
        self._event_log = event_log if event_log is not None else EventLog()
        self._recorder = recorder
        self._lock = threading.RLock()
        self._pending: list[WorldEvent] = []

        self._emit_reset()
        self._pending.clear()
        logger.info("World created (%dx%d, seed=%d)",
                    config.grid_width, config.grid_height, config.world_seed)

    # -- read access --

    @property
    def world(self) -> WorldState:
        """The live state. Mutate only through this machine."""
        return self._world

    @property
    def config(self) -> WorldConfig:
        return self._world.config

    @property
    def event_log(self) -> EventLog:
        return self._event_log

    @property
    def collaborators(self) -> Collaborators:
        return self._collab

    @property
    def rng(self) -> RandomSource:
        return self._rng

    def snapshot(self) -> Snapshot:
        with self._lock:
            return Snapshot.from_world(self._world)

    def cooldown_remaining(self, player_id: int) -> int:
        with self._lock:
            return CollectAction.cooldown_remaining(self._world, player_id)

    # -- player operations --

    def join(self, caller: str, player_id: int) -> Vector2:
        return self.apply(ActionProposal(player_id, ActionType.JOIN, caller))

    def move(self, caller: str, player_id: int, direction: Direction) -> Vector2:
        return self.apply(ActionProposal(player_id, ActionType.MOVE, caller, Direction(direction)))

    def collect_tokens(self, caller: str, player_id: int) -> int:
        return self.apply(ActionProposal(player_id, ActionType.COLLECT_TOKENS, caller))

    def collect_health(self, caller: str, player_id: int) -> int:
        return self.apply(ActionProposal(player_id, ActionType.COLLECT_HEALTH, caller))

    # -- administrative operations --

    def start(self, caller: str) -> None:
        self.apply(ActionProposal(0, ActionType.START, caller))

    def stop(self, caller: str) -> None:
        self.apply(ActionProposal(0, ActionType.STOP, caller))

    def restart(self, caller: str) -> int:
        return self.apply(ActionProposal(0, ActionType.RESTART, caller))

    def shuffle(self, caller: str, seed_a: int, seed_b: int) -> list[Drop]:
        return self.apply(ActionProposal(0, ActionType.SHUFFLE, caller, (seed_a, seed_b)))

    def configure(self, caller: str, **changes: Any) -> WorldConfig:
        return self.apply(ActionProposal(0, ActionType.CONFIGURE, caller, dict(changes)))

    # -- clock --

    # An empty caller is the world's own clock; a named caller must be the
    # administrator.

    def advance(self, ticks: int = 1, caller: str = "") -> int:
        """Move the clock forward *ticks* ticks; returns the new tick."""
        return self.apply(ActionProposal(0, ActionType.ADVANCE, caller, ticks))

    def advance_time(self, seconds: int, caller: str = "") -> int:
        """Move only the timestamp forward; returns the new timestamp."""
        return self.apply(ActionProposal(0, ActionType.ADVANCE_TIME, caller, seconds))

    # -- dispatch --

    def apply(self, proposal: ActionProposal) -> Any:
        """Apply one proposal under the world lock and return its result."""
        with self._lock:
            self._pending = []
            try:
                result = self._dispatch(proposal)
            except WorldError as exc:
                logger.debug("Rejected %s: %s", proposal, exc)
                self._record(proposal, exc.code)
                raise
            self._record(proposal, None)
            return result

    def _dispatch(self, proposal: ActionProposal) -> Any:
        pid, caller = proposal.actor_id, proposal.caller
        match proposal.verb:
            case ActionType.JOIN:
                return self._join(caller, pid)
            case ActionType.MOVE:
                return self._move(caller, pid, Direction(proposal.target))
            case ActionType.COLLECT_TOKENS:
                return self._collect(caller, pid, ResourceKind.TOKEN)
            case ActionType.COLLECT_HEALTH:
                return self._collect(caller, pid, ResourceKind.HEALTH)
            case ActionType.START:
                return self._set_active(caller, True)
            case ActionType.STOP:
                return self._set_active(caller, False)
            case ActionType.RESTART:
                return self._restart(caller)
            case ActionType.SHUFFLE:
                seed_a, seed_b = proposal.target
                return self._shuffle(caller, seed_a, seed_b)
            case ActionType.CONFIGURE:
                return self._configure(caller, proposal.target or {})
            case ActionType.ADVANCE:
                return self._advance(caller, 1 if proposal.target is None else int(proposal.target))
            case ActionType.ADVANCE_TIME:
                return self._advance_time(caller, int(proposal.target))
        raise ValueError(f"unsupported verb {proposal.verb!r}")

    def _record(self, proposal: ActionProposal, error: str | None) -> None:
        if self._recorder is not None:
            self._recorder.record(self._world.tick, proposal, list(self._pending), error)

    # -- transitions --

    def _join(self, caller: str, player_id: int) -> Vector2:
        world = self._world
        require_controller(self._collab, player_id, caller)
        if not world.active:
            raise GameNotActiveError("the world is not accepting players")
        rejoining = world.in_roster(player_id)
        if not rejoining and len(world.roster) >= world.config.max_players:
            raise CapacityExceededError(
                f"roster is full ({len(world.roster)}/{world.config.max_players})"
            )

        stream = self._stream(Domain.PLACEMENT, caller, player_id)
        pos = PlacementEngine.place(world, player_id, stream)
        if not rejoining:
            world.roster.append(player_id)

        self._emit(
            EventType.PLAYER_REGISTERED,
            f"Player {player_id} registered by {caller} at {pos}",
            (player_id,),
            caller=caller,
            owner=self._collab.owners.owner_of(player_id),
            x=pos.x,
            y=pos.y,
            rejoin=rejoining,
        )
        self._emit_placed(player_id, pos)
        logger.info("Player %d joined at %s (roster=%d)", player_id, pos, len(world.roster))
        return pos

    def _move(self, caller: str, player_id: int, direction: Direction) -> Vector2:
        world = self._world
        target = MoveAction.validate(world, self._collab, player_id, caller, direction)
        health = MoveAction.apply(world, self._collab, player_id, target)
        self._emit(
            EventType.PLAYER_MOVED,
            f"Player {player_id} moved {direction.name} to {target}",
            (player_id,),
            caller=caller,
            x=target.x,
            y=target.y,
            health=health,
        )
        return target

    def _collect(self, caller: str, player_id: int, kind: ResourceKind) -> int:
        world = self._world
        pos = CollectAction.validate(world, self._collab, player_id, caller)
        amount = CollectAction.apply(world, self._collab, player_id, caller, pos, kind)
        self._emit(
            _COLLECT_EVENTS[kind],
            f"Player {player_id} collected {amount} {kind.name.lower()} at {pos}",
            (player_id,),
            caller=caller,
            amount=amount,
            x=pos.x,
            y=pos.y,
        )
        logger.info("Player %d collected %d %s at %s", player_id, amount, kind.name, pos)
        if world.config.drop_on_collect:
            self._drop(kind, amount, caller, player_id)
        return amount

    def _drop(self, kind: ResourceKind, amount: int, caller: str, target: int) -> Drop:
        stream = self._stream(Domain.DROP, caller, target)
        drop = DropEngine.drop(self._world, kind, amount, stream)
        self._emit_drop(drop)
        return drop

    def _set_active(self, caller: str, active: bool) -> None:
        self._admin.require(caller)
        self._world.active = active
        if active:
            self._emit(EventType.GAME_STARTED, "World opened for joining")
        else:
            self._emit(EventType.GAME_ENDED, "World closed for joining")
        logger.info("World %s by %s", "started" if active else "stopped", caller)

    def _restart(self, caller: str) -> int:
        self._admin.require(caller)
        world = self._world
        for pid in world.roster:
            world.vacate(pid)
        world.roster.clear()
        world.players.clear()
        world.epoch += 1
        world.epoch_tick = world.tick
        self._emit_reset()
        logger.info("World restarted, epoch %d", world.epoch)
        return world.epoch

    def _shuffle(self, caller: str, seed_a: int, seed_b: int) -> list[Drop]:
        self._admin.require(caller)
        drops = self._drops.shuffle(self._world, seed_a, seed_b)
        for drop in drops:
            self._emit_drop(drop)
        logger.info("Reseeded %d deposits", len(drops))
        return drops

    def _configure(self, caller: str, changes: Mapping[str, Any]) -> WorldConfig:
        self._admin.require(caller)
        world = self._world
        world.config = world.config.with_changes(**changes)
        self._emit(
            EventType.CONFIG_CHANGED,
            "Configuration changed: " + ", ".join(f"{k}={v!r}" for k, v in sorted(changes.items())),
            **changes,
        )
        return world.config

    def _advance(self, caller: str, ticks: int) -> int:
        if caller:
            self._admin.require(caller)
        if ticks < 0:
            raise ValueError(f"ticks only move forward, got {ticks}")
        world = self._world
        world.tick += ticks
        world.timestamp += ticks * world.config.seconds_per_tick
        return world.tick

    def _advance_time(self, caller: str, seconds: int) -> int:
        if caller:
            self._admin.require(caller)
        if seconds < 0:
            raise ValueError(f"time only moves forward, got {seconds}")
        self._world.timestamp += seconds
        return self._world.timestamp

    # -- helpers --

    def _stream(self, domain: Domain, caller: str, target: int) -> DrawStream:
        world = self._world
        context = EntropyContext(
            tick_hash=self._rng.tick_hash(world.tick),
            caller=caller,
            principal=self._collab.owners.owner_of(target) or caller,
            target=target,
            system_id=world.config.system_id,
            domain=domain,
            nonce=world.next_nonce(),
        )
        return self._rng.stream(context)

    def _emit(
        self,
        category: EventType,
        message: str,
        player_ids: tuple[int, ...] = (),
        **data: Any,
    ) -> None:
        world = self._world
        event = WorldEvent(
            tick=world.tick,
            epoch=world.epoch,
            category=category,
            message=message,
            player_ids=player_ids,
            data=data,
        )
        self._pending.append(event)
        self._event_log.append(event)

    def _emit_reset(self) -> None:
        cfg = self._world.config
        self._emit(
            EventType.WORLD_RESET,
            f"World reset to epoch {self._world.epoch}",
            width=cfg.grid_width,
            height=cfg.grid_height,
            epoch=self._world.epoch,
        )

    def _emit_placed(self, player_id: int, pos: Vector2) -> None:
        self._emit(
            EventType.PLAYER_PLACED,
            f"Player {player_id} placed at {pos}",
            (player_id,),
            x=pos.x,
            y=pos.y,
            health=self._collab.health.health_of(player_id),
        )

    def _emit_drop(self, drop: Drop) -> None:
        self._emit(
            EventType.RESOURCE_DROPPED,
            f"{drop.amount} {drop.kind.name.lower()} dropped at {drop.position}",
            kind=drop.kind.name,
            amount=drop.amount,
            x=drop.position.x,
            y=drop.position.y,
        )
