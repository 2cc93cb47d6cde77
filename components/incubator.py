"""Incubator - a heatlamp-controlled enclosure inside the room"""

from components.thermal_response import ThermalResponse

HEATLAMP_TEMPERATURE = 40.0  # Celsius


class Incubator:
    """
    Incubator for chicks with a heatlamp that can be on, off, or broken.

    The setpoint of the thermal model is the heatlamp temperature while the
    lamp is on and working; otherwise it is the ambient temperature. Every
    state change re-applies that rule immediately, except fix_heatlamp(),
    which only clears the broken flag.
    """

    def __init__(self, initial_temperature, halflife_steps, ambient_temperature,
                 heatlamp_temperature=HEATLAMP_TEMPERATURE):
        self._model = ThermalResponse(initial_temperature, halflife_steps)
        self._heatlamp_temperature = float(heatlamp_temperature)
        self._heatlamp_on = False
        self._heatlamp_broken = False
        self._ambient_temperature = float(ambient_temperature)
        self._model.set_setpoint(self._ambient_temperature)

    # ========== HEATLAMP ==========

    def turn_on_heatlamp(self):
        self._heatlamp_on = True
        if not self._heatlamp_broken:
            self._model.set_setpoint(self._heatlamp_temperature)
        else:
            self._model.set_setpoint(self._ambient_temperature)

    def turn_off_heatlamp(self):
        self._heatlamp_on = False
        self._model.set_setpoint(self._ambient_temperature)

    def break_heatlamp(self):
        """A broken lamp cannot heat, even while switched on."""
        self._heatlamp_broken = True
        self._model.set_setpoint(self._ambient_temperature)

    def fix_heatlamp(self):
        # Does not reheat: a lamp still marked on needs turn_on_heatlamp() again.
        self._heatlamp_broken = False

    # ========== AMBIENT ==========

    def set_ambient_temperature(self, temperature):
        self._ambient_temperature = float(temperature)
        if not self._heatlamp_on or self._heatlamp_broken:
            self._model.set_setpoint(self._ambient_temperature)

    # ========== SIMULATION ==========

    def step(self):
        self._model.step()

    # ========== STATUS ==========

    @property
    def temperature(self):
        return self._model.temperature

    @property
    def setpoint(self):
        return self._model.setpoint

    @property
    def ambient_temperature(self):
        return self._ambient_temperature

    @property
    def heatlamp_on(self):
        return self._heatlamp_on

    @property
    def heatlamp_broken(self):
        return self._heatlamp_broken

    def heatlamp_state(self):
        """Reported lamp state: 1 if switched on, 0 otherwise (broken flag ignored)"""
        return 1 if self._heatlamp_on else 0
