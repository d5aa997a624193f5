"""Tests for the headless command-line modes.

Covers:
- ``cli`` runs a scripted session and writes a replay file
- ``replay`` re-runs that file and reports the same final state
- ``replay`` takes owners and health from the recorded characters
"""

import sys
import os
import json

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from gridworld.__main__ import main
from gridworld.core.errors import UnauthorizedError
from gridworld.utils.replay import ReplayRecorder
from tests.helpers.world_arena import ADMIN, WorldArena


class TestCommandLine:
    def test_cli_writes_replay(self, tmp_path):
        path = tmp_path / "session.json"
        main(["cli", "--seed", "3", "--players", "4", "--rounds", "5",
              "--replay", str(path), "--log-level", "WARNING"])
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["seed"] == 3
        verbs = [p["verb"] for p in data["proposals"]]
        assert verbs[:2] == ["START", "SHUFFLE"]
        assert verbs.count("JOIN") == 4
        assert verbs.count("ADVANCE") == 5
        assert data["total_proposals"] == len(verbs)
        assert data["characters"] == [
            {"player": i + 1, "owner": f"player-{i}", "health": 100} for i in range(4)
        ]

    def test_replay_uses_recorded_owners(self, tmp_path, capsys):
        path = tmp_path / "intruder.json"
        recorder = ReplayRecorder(path, seed=42)
        arena = WorldArena(start=False, recorder=recorder)
        pid = arena.mint("alice")
        arena.machine.start(ADMIN)
        with pytest.raises(UnauthorizedError):
            arena.machine.join("mallory", pid)
        arena.machine.join("alice", pid)
        recorder.flush()

        main(["replay", str(path)])
        out = capsys.readouterr().out
        assert "replayed 3 proposals (1 rejected)" in out
        assert "roster=1" in out

    def test_replay_reports_summary(self, tmp_path, capsys):
        path = tmp_path / "session.json"
        main(["cli", "--seed", "3", "--players", "2", "--rounds", "3",
              "--replay", str(path), "--log-level", "WARNING"])
        main(["replay", str(path)])
        out = capsys.readouterr().out
        assert "tick=3" in out
        assert "roster=2" in out
