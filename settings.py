import json
import os

SIMULATION_DEFAULTS = {
    "incubators": 10,
    "room_temperature": 25.0,
    "outside_temperature_near": 0.0,
    "outside_temperature_far": 15.0,
    "heatlamp_temperature": 40.0,
    "halflife_seconds": 90.0,
    "step_ms": 100,
    "reading_interval_ms": 10000,
    "tick_seconds": 0.01,
}


def load_settings(filePath='settings.json'):
    if not os.path.isabs(filePath):
        base_dir = os.path.dirname(os.path.abspath(__file__))
        filePath = os.path.join(base_dir, filePath)
    with open(filePath, 'r') as f:
        settings = json.load(f)
    return settings


def simulation_settings(settings):
    """Simulation section merged over defaults, with the half-life in steps."""
    sim = dict(SIMULATION_DEFAULTS)
    sim.update(settings.get("simulation", {}))
    sim["halflife_steps"] = sim["halflife_seconds"] * 1000 / sim["step_ms"]
    return sim
