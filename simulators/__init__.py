from simulators.command_queue import CommandKind, ControlRecord, CommandQueue
from simulators.incubator_simulator import IncubatorSimulator, Reading, DEFAULT_SCENARIO

__all__ = [
    'CommandKind',
    'ControlRecord',
    'CommandQueue',
    'IncubatorSimulator',
    'Reading',
    'DEFAULT_SCENARIO',
]
