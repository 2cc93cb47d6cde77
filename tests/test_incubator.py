"""Unit tests for the Incubator heatlamp/ambient setpoint logic."""

import pytest

from components import Incubator, HEATLAMP_TEMPERATURE
from errors import InvalidParameter


def _make_incubator(ambient=25.0):
    return Incubator(25.0, 900, ambient)


class TestInitialState:
    def test_lamp_off_and_working(self):
        inc = _make_incubator()
        assert not inc.heatlamp_on
        assert not inc.heatlamp_broken
        assert inc.heatlamp_state() == 0

    def test_setpoint_is_ambient(self):
        inc = Incubator(30.0, 900, 22.0)
        assert inc.temperature == 30.0
        assert inc.setpoint == 22.0

    def test_invalid_halflife_propagates(self):
        with pytest.raises(InvalidParameter):
            Incubator(25.0, 0, 25.0)


class TestHeatlamp:
    def test_turn_on_heats(self):
        inc = _make_incubator()
        inc.turn_on_heatlamp()
        assert inc.setpoint == HEATLAMP_TEMPERATURE
        assert inc.heatlamp_state() == 1

    def test_turn_off_returns_to_ambient(self):
        inc = _make_incubator()
        inc.turn_on_heatlamp()
        inc.turn_off_heatlamp()
        assert inc.setpoint == 25.0
        assert inc.heatlamp_state() == 0

    def test_custom_heatlamp_temperature(self):
        inc = Incubator(25.0, 900, 25.0, heatlamp_temperature=37.5)
        inc.turn_on_heatlamp()
        assert inc.setpoint == 37.5

    @pytest.mark.parametrize("lamp_on", [True, False])
    def test_break_always_drops_to_ambient(self, lamp_on):
        inc = _make_incubator(ambient=18.0)
        if lamp_on:
            inc.turn_on_heatlamp()
        inc.break_heatlamp()
        assert inc.setpoint == inc.ambient_temperature == 18.0
        assert inc.heatlamp_broken

    def test_broken_lamp_reports_on_state(self):
        """Reported lamp state ignores the broken flag."""
        inc = _make_incubator()
        inc.turn_on_heatlamp()
        inc.break_heatlamp()
        assert inc.heatlamp_state() == 1

    def test_turn_on_while_broken_stays_ambient(self):
        inc = _make_incubator()
        inc.break_heatlamp()
        inc.turn_on_heatlamp()
        assert inc.heatlamp_on
        assert inc.setpoint == 25.0

    @pytest.mark.parametrize("lamp_on", [True, False])
    def test_fix_alone_never_changes_setpoint(self, lamp_on):
        inc = _make_incubator()
        if lamp_on:
            inc.turn_on_heatlamp()
        inc.break_heatlamp()
        before = inc.setpoint

        inc.fix_heatlamp()

        assert not inc.heatlamp_broken
        assert inc.setpoint == before

    def test_fix_then_turn_on_restores_heating(self):
        inc = _make_incubator()
        inc.turn_on_heatlamp()
        inc.break_heatlamp()
        inc.fix_heatlamp()
        inc.turn_on_heatlamp()
        assert inc.setpoint == HEATLAMP_TEMPERATURE


class TestAmbient:
    def test_lamp_on_keeps_setpoint(self):
        inc = _make_incubator()
        inc.turn_on_heatlamp()
        inc.set_ambient_temperature(5.0)
        assert inc.setpoint == HEATLAMP_TEMPERATURE
        assert inc.ambient_temperature == 5.0

    def test_lamp_off_follows_ambient(self):
        inc = _make_incubator()
        inc.set_ambient_temperature(5.0)
        assert inc.setpoint == 5.0

    def test_broken_lamp_follows_ambient(self):
        inc = _make_incubator()
        inc.turn_on_heatlamp()
        inc.break_heatlamp()
        inc.set_ambient_temperature(7.0)
        assert inc.setpoint == 7.0

    def test_turn_off_uses_latest_ambient(self):
        inc = _make_incubator()
        inc.turn_on_heatlamp()
        inc.set_ambient_temperature(3.0)
        inc.turn_off_heatlamp()
        assert inc.setpoint == 3.0


class TestStep:
    def test_step_moves_toward_heatlamp(self):
        inc = _make_incubator()
        inc.turn_on_heatlamp()
        inc.step()
        assert 25.0 < inc.temperature < HEATLAMP_TEMPERATURE

    def test_idle_incubator_stays_at_room(self):
        inc = _make_incubator()
        for _ in range(10):
            inc.step()
        assert inc.temperature == pytest.approx(25.0)
