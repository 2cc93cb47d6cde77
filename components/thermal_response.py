"""Thermal response - exponential approach of a temperature to its setpoint"""

import math

from errors import InvalidParameter


class ThermalResponse:
    """
    A scalar temperature that decays toward a setpoint.

    Every call to step() closes a fixed fraction of the remaining gap, chosen
    so that the gap halves after `halflife_steps` steps:

        response = 1 - exp(-ln 2 / halflife_steps)
    """

    def __init__(self, initial_temperature, halflife_steps):
        if not halflife_steps > 0:
            raise InvalidParameter("Half life must be > 0 steps")
        self._temperature = float(initial_temperature)
        self._setpoint = float(initial_temperature)
        self._halflife_steps = halflife_steps
        self._response = 1.0 - math.exp(-math.log(2.0) / halflife_steps)

    @property
    def temperature(self):
        return self._temperature

    @property
    def setpoint(self):
        return self._setpoint

    @property
    def response(self):
        return self._response

    @property
    def halflife_steps(self):
        return self._halflife_steps

    def set_setpoint(self, value):
        self._setpoint = float(value)

    def step(self):
        self._temperature += self._response * (self._setpoint - self._temperature)
