"""
Tests for the command line demo.
"""

from datetime import datetime
import json
import logging

import pytest

from main import main, rotate_commentary
from promise_orchestrator.config.settings import Settings, StreamConfig, StoryConfig, get_settings
from promise_orchestrator.orchestration import OrchestratorSession, TickClock


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestCli:

    def test_report(self, capsys):
        assert main([]) == 0
        out = capsys.readouterr().out
        assert "RECOMMENDED ACTIONS" in out
        assert "[tighten-promise]" in out
        assert "ACTIVITY STREAM" in out

    def test_json_snapshot(self, capsys):
        assert main(["--json"]) == 0
        snapshot = json.loads(capsys.readouterr().out)
        assert snapshot["scenario"]["policy"] == "Balanced"
        assert len(snapshot["buckets"]) == 10
        assert snapshot["on_time_rate"] == pytest.approx(0.90256, abs=1e-4)
        assert [a["id"] for a in snapshot["actions"]] == [
            "tighten-promise", "rebalance-nodes", "boost-crowd"
        ]

    def test_apply_plan(self, capsys):
        assert main(["--apply", "--json"]) == 0
        snapshot = json.loads(capsys.readouterr().out)
        assert snapshot["scenario"]["policy"] == "Reliable"
        assert [a["id"] for a in snapshot["actions"]] == ["rebalance-nodes", "boost-crowd"]

    def test_out_of_range_values_are_clamped(self, capsys):
        assert main(["--surge", "9", "--json"]) == 0
        snapshot = json.loads(capsys.readouterr().out)
        assert snapshot["scenario"]["surge"] == 1.0

    def test_story_and_ticks(self, capsys):
        assert main(["--story", "--ticks", "2"]) == 0
        out = capsys.readouterr().out
        assert "Story Mode: holiday spike" in out
        assert "finish" in out
        assert "Orchestrator" in out

    def test_invalid_policy(self, capsys):
        assert main(["--policy", "Bogus"]) == 2
        assert "Invalid scenario" in capsys.readouterr().err

    def test_story_narration_stays_out_of_json(self, capsys):
        assert main(["--story", "--json"]) == 0
        captured = capsys.readouterr()
        snapshot = json.loads(captured.out)
        assert snapshot["scenario"]["policy"] == "Reliable"
        assert "Story Mode: holiday spike" in captured.err

    def test_empty_plan_notice_stays_out_of_json(self, capsys):
        argv = ["--surge", "0", "--weather", "0", "--ups-delta", "0", "--crowd-boost", "0", "--apply", "--json"]
        assert main(argv) == 0
        captured = capsys.readouterr()
        snapshot = json.loads(captured.out)
        assert snapshot["actions"] == []
        assert "Nothing to apply." in captured.err

    def test_lowercase_log_level(self, monkeypatch, capsys):
        calls = []
        monkeypatch.setenv("ORCHESTRATOR_LOG_LEVEL", "info")
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))
        assert main(["--json"]) == 0
        assert calls[0]["level"] == "INFO"
        assert logging.getLevelName(calls[0]["level"]) == logging.INFO


class TestCommentaryTicks:

    def test_ticks_advance_by_rotation_interval(self):
        settings = Settings(stream=StreamConfig(rotation_interval_seconds=60), story=StoryConfig())
        clock = TickClock(datetime(2026, 11, 27, 14, 5), settings.stream.rotation_interval_seconds)
        session = OrchestratorSession(settings=settings, clock=clock)
        session.enter_app()

        rotate_commentary(session, clock, 3)

        assert [e.t for e in session.stream.events[:3]] == ["14:08", "14:07", "14:06"]
        assert all(e.who == "Agent" for e in session.stream.events[:3])

    def test_rotation_interval_from_environment(self, monkeypatch):
        monkeypatch.setenv("STREAM_ROTATION_INTERVAL_SECONDS", "90")
        clock = TickClock(datetime(2026, 11, 27, 14, 5), StreamConfig().rotation_interval_seconds)
        clock.tick()
        assert clock().strftime("%H:%M:%S") == "14:06:30"
