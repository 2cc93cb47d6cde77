"""Tests for IncubatorController wiring and console commands."""

import time

import pytest

from controllers import IncubatorController
from controllers.incubator_controller import scenario_from_settings
from main import parse_args
from simulators import CommandKind, IncubatorSimulator
from simulators.incubator_simulator import DEFAULT_SCENARIO

OFFLINE_SETTINGS = {
    "device": {"id": "TEST-ROOM"},
    "simulation": {"incubators": 4, "tick_seconds": 0.001},
    "scenario": [],
    "mqtt": {"enabled": False},
    "webapp": {"enabled": False},
}


@pytest.fixture
def controller():
    ctrl = IncubatorController(OFFLINE_SETTINGS, start_time_ms=0)
    yield ctrl
    ctrl.cleanup()


class TestWiring:
    def test_builds_incubators_from_settings(self, controller):
        assert len(controller.incubators) == 4
        assert controller.simulator.unit_count == 4
        assert all(inc.setpoint == 25.0 for inc in controller.incubators)

    def test_scenario_is_scheduled(self):
        settings = dict(OFFLINE_SETTINGS, scenario=[{"delay_ms": 1000, "command": "BUST_HEATLAMP", "id": 2}])
        ctrl = IncubatorController(settings, start_time_ms=0)
        (record,) = ctrl.command_queue.drain_due(10_000)
        assert record.kind is CommandKind.BUST_HEATLAMP
        assert record.scheduled_time_ms == 1000

    def test_missing_scenario_uses_default(self):
        assert scenario_from_settings(None) is DEFAULT_SCENARIO
        assert scenario_from_settings([]) == ()

    def test_start_and_stop_offline(self, controller):
        controller.start()
        deadline = time.monotonic() + 5
        while not controller.simulator.latest_snapshot and time.monotonic() < deadline:
            time.sleep(0.005)
        status = controller.get_status()
        assert status["state"] == IncubatorSimulator.RUNNING
        assert len(status["readings"]) == 4

        controller.stop()
        assert controller.simulator.get_state() == IncubatorSimulator.STOPPED


class TestConsoleCommands:
    def test_heatlamp_command(self, controller):
        assert controller.handle_command("on 2") is True
        controller.simulator.tick()
        assert controller.incubators[2].heatlamp_on

    def test_room_command(self, controller):
        assert controller.handle_command("open") is True
        controller.simulator.tick()
        assert controller.incubators[0].ambient_temperature == 0.0

    def test_missing_unit(self, controller):
        assert controller.handle_command("bust") is False
        assert len(controller.command_queue) == 0

    def test_unknown_command(self, controller):
        assert controller.handle_command("jump 1") is None

    def test_status(self, controller, capsys):
        controller.simulator.tick()
        assert controller.handle_command("s") is True
        assert "lamp OFF" in capsys.readouterr().out


class TestMain:
    def test_parse_args(self):
        args = parse_args(["--duration", "2.5"])
        assert args.duration == 2.5
        assert args.settings == "settings.json"
