import pytest

from components import Incubator
from simulators import CommandQueue, IncubatorSimulator

ROOM = 25.0
HALFLIFE_STEPS = 900  # 90 s at 100 ms per step


class RecordingPublisher:
    """Collects every snapshot handed to it by the simulator."""

    def __init__(self):
        self.snapshots = []

    def publish(self, snapshot):
        self.snapshots.append(snapshot)


def make_incubators(count=10, temperature=ROOM):
    return [Incubator(temperature, HALFLIFE_STEPS, ROOM) for _ in range(count)]


@pytest.fixture
def publisher():
    return RecordingPublisher()


@pytest.fixture
def incubators():
    return make_incubators()


@pytest.fixture
def queue():
    return CommandQueue()


@pytest.fixture
def simulator(incubators, queue, publisher):
    sim = IncubatorSimulator(incubators, queue, publisher=publisher,
                             start_time_ms=0, tick_seconds=0.001)
    yield sim
    sim.stop(timeout=2)
