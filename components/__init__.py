from components.thermal_response import ThermalResponse
from components.incubator import Incubator, HEATLAMP_TEMPERATURE

__all__ = [
    'ThermalResponse',
    'Incubator',
    'HEATLAMP_TEMPERATURE',
]
