"""Entry point: ``python -m gridworld``.

Supports three modes:
  - ``python -m gridworld serve``   → Launch the FastAPI server
  - ``python -m gridworld cli``     → Headless scripted session, writes a replay
  - ``python -m gridworld replay``  → Re-run a replay file and print the final state
"""

from __future__ import annotations

import argparse
import logging

from gridworld.config import WorldConfig

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Grid World State Machine")
    sub = parser.add_subparsers(dest="command")

    # --- Server mode (default) ---
    srv = sub.add_parser("serve", help="Start the FastAPI server (default)")
    srv.add_argument("--host", type=str, default="127.0.0.1")
    srv.add_argument("--port", type=int, default=8000)
    srv.add_argument("--seed", type=int, default=42)
    srv.add_argument("--admin", type=str, default="admin")
    srv.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])

    # --- Headless CLI mode ---
    cli = sub.add_parser("cli", help="Run a headless scripted session")
    cli.add_argument("--seed", type=int, default=42)
    cli.add_argument("--players", type=int, default=10)
    cli.add_argument("--rounds", type=int, default=50)
    cli.add_argument("--replay", type=str, default=WorldConfig.replay_file)
    cli.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])

    # --- Replay mode ---
    rep = sub.add_parser("replay", help="Re-run a recorded replay file")
    rep.add_argument("path", type=str)
    rep.add_argument("--log-level", type=str, default="WARNING", choices=["DEBUG", "INFO", "WARNING"])

    return parser


def _run_server(args: argparse.Namespace) -> None:
    import uvicorn

    from gridworld.api.app import create_app

    config = WorldConfig(world_seed=args.seed, admin=args.admin, log_level=args.log_level)
    app = create_app(config)
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())


def _build_machine(seed: int, recorder=None):
    from gridworld.actions.base import Collaborators
    from gridworld.collaborators import CharacterStore, InMemoryTokenLedger, SingleAdminGate
    from gridworld.engine.world_machine import WorldMachine

    config = WorldConfig(world_seed=seed)
    characters = CharacterStore()
    ledger = InMemoryTokenLedger()
    collab = Collaborators(owners=characters, health=characters, ledger=ledger)
    machine = WorldMachine(config, collab, SingleAdminGate(config.admin), recorder=recorder)
    return machine, characters, ledger


def _run_cli(args: argparse.Namespace) -> None:
    from gridworld.core.enums import Direction, Domain
    from gridworld.core.errors import WorldError
    from gridworld.systems.rng import EntropyContext
    from gridworld.utils.logging import setup_logging
    from gridworld.utils.replay import ReplayRecorder

    setup_logging(args.log_level)

    recorder = ReplayRecorder(args.replay, args.seed)
    machine, characters, ledger = _build_machine(args.seed, recorder)
    cfg = machine.config
    admin = cfg.admin

    machine.start(admin)
    machine.shuffle(admin, args.seed, args.seed + 1)

    players: list[tuple[str, int]] = []
    for i in range(min(args.players, cfg.max_players)):
        owner = f"player-{i}"
        pid = characters.mint(owner, cfg.starting_health)
        recorder.record_character(pid, owner, cfg.starting_health)
        machine.join(owner, pid)
        players.append((owner, pid))

    # Script moves with a stream of its own so sessions are reproducible.
    script = machine.rng.stream(EntropyContext(
        tick_hash=0,
        caller="cli",
        principal="cli",
        target=0,
        system_id=cfg.system_id,
        domain=Domain.DROP,
        salt=str(args.seed).encode(),
    ))
    rejected = 0
    for _ in range(args.rounds):
        machine.advance(1)
        for owner, pid in players:
            direction = Direction(script.below(len(Direction)))
            try:
                machine.move(owner, pid, direction)
                machine.collect_tokens(owner, pid)
            except WorldError:
                rejected += 1

    recorder.flush()
    logger.info(
        "Session done: tick=%d, supply=%d, rejected=%d, events=%d",
        machine.world.tick, ledger.total_supply, rejected, len(machine.event_log),
    )
    for owner, pid in players:
        logger.info("  %s (player %d): balance=%d health=%d at %s",
                    owner, pid, ledger.balance_of(owner), characters.health_of(pid),
                    machine.world.position_of(pid))


def _run_replay(args: argparse.Namespace) -> None:
    from gridworld.core.errors import WorldError
    from gridworld.utils.logging import setup_logging
    from gridworld.utils.replay import load_replay

    setup_logging(args.log_level)
    seed, recorded_characters, proposals = load_replay(args.path)
    machine, characters, ledger = _build_machine(seed)

    for c in sorted(recorded_characters, key=lambda c: c["player"]):
        pid = characters.mint(c["owner"], c["health"])
        if pid != c["player"]:
            raise ValueError(f"replay character ids are not contiguous: expected {pid}, got {c['player']}")

    rejected = 0
    for p in proposals:
        try:
            machine.apply(p)
        except WorldError:
            rejected += 1
    snap = machine.snapshot()
    print(f"replayed {len(proposals)} proposals ({rejected} rejected): tick={snap.tick} "
          f"epoch={snap.epoch} roster={len(snap.roster)} supply={ledger.total_supply}")


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command == "cli":
        _run_cli(args)
    elif args.command == "replay":
        _run_replay(args)
    else:
        if args.command is None:
            args = parser.parse_args(["serve"])
        _run_server(args)


if __name__ == "__main__":
    main()
