"""Unit tests for the exponential ThermalResponse model."""

import math

import pytest

from components.thermal_response import ThermalResponse
from errors import InvalidParameter


class TestConstruction:
    def test_setpoint_starts_at_initial_temperature(self):
        model = ThermalResponse(25.0, 10)
        assert model.temperature == 25.0
        assert model.setpoint == 25.0

    def test_response_fraction(self):
        model = ThermalResponse(25.0, 900)
        assert model.response == pytest.approx(1 - math.exp(-math.log(2) / 900))
        assert 0.0 < model.response < 1.0

    @pytest.mark.parametrize("halflife", [0, -1, -0.5, float("nan")])
    def test_non_positive_halflife_rejected(self, halflife):
        with pytest.raises(InvalidParameter):
            ThermalResponse(25.0, halflife)

    def test_invalid_parameter_is_value_error(self):
        with pytest.raises(ValueError):
            ThermalResponse(25.0, 0)


class TestStep:
    @pytest.mark.parametrize("halflife", [1, 5, 37, 900])
    def test_gap_halves_after_halflife_steps(self, halflife):
        """After exactly halflife steps the gap to the setpoint is halved."""
        model = ThermalResponse(25.0, halflife)
        model.set_setpoint(40.0)

        for _ in range(halflife):
            model.step()

        assert abs(40.0 - model.temperature) == pytest.approx(7.5, rel=1e-9)

    def test_single_step_formula(self):
        model = ThermalResponse(10.0, 3)
        model.set_setpoint(20.0)
        expected = 10.0 + model.response * 10.0

        model.step()

        assert model.temperature == pytest.approx(expected)

    def test_never_overshoots(self):
        """Cooling approaches but never passes the setpoint."""
        model = ThermalResponse(40.0, 2)
        model.set_setpoint(0.0)

        for _ in range(200):
            model.step()
            assert model.temperature >= 0.0

    def test_at_setpoint_is_steady(self):
        model = ThermalResponse(25.0, 10)
        model.step()
        assert model.temperature == 25.0

    def test_set_setpoint_does_not_move_temperature(self):
        model = ThermalResponse(25.0, 10)
        model.set_setpoint(-5.0)
        assert model.setpoint == -5.0
        assert model.temperature == 25.0
