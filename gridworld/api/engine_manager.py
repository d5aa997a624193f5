"""EngineManager — owns the WorldMachine and its collaborators for the API.

The machine serializes every operation itself; the manager adds an optional
background clock thread that advances the world tick at ``tick_rate``
seconds per tick, the way a chain produces blocks.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from gridworld.actions.base import Collaborators
from gridworld.collaborators.admin import SingleAdminGate
from gridworld.collaborators.characters import CharacterStore
from gridworld.collaborators.tokens import InMemoryTokenLedger
from gridworld.core.snapshot import Snapshot
from gridworld.engine.world_machine import WorldMachine
from gridworld.utils.event_log import EventLog

if TYPE_CHECKING:
    from gridworld.config import WorldConfig

logger = logging.getLogger(__name__)


class EngineManager:
    """Manages one world and its clock.

    Provides thread-safe access to:
      - the machine (internally locked)
      - snapshots (copied under the machine lock)
      - the event log (lock-guarded)
      - clock control (start / stop / single tick / reset)
    """

    def __init__(self, config: WorldConfig) -> None:
        self._config = config
        self._tick_rate: float = 1.0  # seconds between ticks

        self.characters: CharacterStore
        self.ledger: InMemoryTokenLedger
        self.machine: WorldMachine
        self._admin_gate: SingleAdminGate

        self._thread: threading.Thread | None = None
        self._running = threading.Event()
        self._stop_requested = threading.Event()

        self._build()

    # -- public properties --

    @property
    def config(self) -> WorldConfig:
        return self.machine.config

    @property
    def running(self) -> bool:
        return self._running.is_set()

    @property
    def tick_rate(self) -> float:
        return self._tick_rate

    @tick_rate.setter
    def tick_rate(self, value: float) -> None:
        self._tick_rate = max(0.01, min(value, 60.0))

    @property
    def event_log(self) -> EventLog:
        return self.machine.event_log

    def get_snapshot(self) -> Snapshot:
        return self.machine.snapshot()

    # -- characters --

    def mint(self, owner: str, health: int | None = None) -> int:
        start = self.config.starting_health if health is None else health
        return self.characters.mint(owner, start)

    # -- clock lifecycle --

    def start(self) -> None:
        if self._running.is_set():
            return
        self._stop_requested.clear()
        self._running.set()
        self._thread = threading.Thread(target=self._run_clock, name="world-clock", daemon=True)
        self._thread.start()
        logger.info("Clock started (tick_rate=%.3fs)", self._tick_rate)

    def stop(self) -> None:
        self._stop_requested.set()
        self._running.clear()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)
        self._thread = None
        logger.info("Clock stopped at tick %d", self.machine.world.tick)

    def step(self, caller: str = "") -> int:
        """Advance exactly one tick on behalf of *caller* (admin only when named)."""
        return self.machine.advance(1, caller)

    def set_tick_rate(self, caller: str, seconds: float) -> float:
        """Change the background clock rate; administrator only."""
        self._admin_gate.require(caller)
        self.tick_rate = seconds
        logger.info("Clock rate set to %.3fs by %s", self._tick_rate, caller)
        return self._tick_rate

    def reset(self) -> None:
        """Stop the clock and rebuild the world and collaborators from config."""
        was_running = self.running
        self.stop()
        self._build()
        if was_running:
            self.start()
        logger.info("EngineManager reset.")

    # -- internals --

    def _build(self) -> None:
        self.characters = CharacterStore()
        self.ledger = InMemoryTokenLedger()
        collab = Collaborators(owners=self.characters, health=self.characters, ledger=self.ledger)
        self._admin_gate = SingleAdminGate(self._config.admin)
        self.machine = WorldMachine(self._config, collab, self._admin_gate)

    def _run_clock(self) -> None:
        while not self._stop_requested.wait(self._tick_rate):
            self.machine.advance(1)
