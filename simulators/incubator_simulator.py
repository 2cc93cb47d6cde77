"""
Incubator simulation loop.

States:
  IDLE     - created; tick() may be called manually, no loop thread
  RUNNING  - loop thread is ticking on a fixed wall-clock cadence
  STOPPED  - terminal; no further ticks or state mutation

Transitions:
  IDLE    + start() -> RUNNING (launches the loop thread)
  IDLE    + stop()  -> STOPPED
  RUNNING + stop()  -> STOPPED (signals the loop and joins it)

Each tick:
  1. advance simulated time by step_ms
  2. drain due records from the CommandQueue
  3. dispatch them to incubators or the room
  4. step every incubator once
  5. emit a snapshot when more than reading_interval_ms has elapsed since
     the last one (the first tick always emits)

Incubator state is owned by the loop thread. Other threads read it only
through `latest_snapshot`, which is replaced whole inside the tick.
"""

import threading
import time
from collections import namedtuple

from errors import UnknownUnit
from simulators.command_queue import CommandKind, ControlRecord
from simulators.room import (
    ROOM_TEMPERATURE,
    OUTSIDE_TEMPERATURE_NEAR,
    OUTSIDE_TEMPERATURE_FAR,
    open_door,
    close_door,
)

STEP_MS = 100              # simulated time per tick
READING_INTERVAL_MS = 10000
TICK_SECONDS = 0.01        # 10 ms real time per 100 ms simulated -> 10x

# (delay ms from start, command, unit id)
DEFAULT_SCENARIO = (
    (300 * 1000, CommandKind.DOOR_OPEN, None),
    (330 * 1000, CommandKind.DOOR_CLOSED, None),
    (360 * 1000, CommandKind.BUST_HEATLAMP, 5),
    (600 * 1000, CommandKind.DOOR_OPEN, None),
    (630 * 1000, CommandKind.DOOR_CLOSED, None),
    (660 * 1000, CommandKind.FIX_HEATLAMP, 5),
    (900 * 1000, CommandKind.DOOR_OPEN, None),
    (930 * 1000, CommandKind.DOOR_CLOSED, None),
)

Reading = namedtuple('Reading', ['simulated_time_ms', 'unit_id', 'temperature', 'heatlamp'])


class IncubatorSimulator:
    """
    Fixed-step simulation of a row of incubators driven by a CommandQueue.

    Parameters:
        incubators          (list)          - Incubator instances, indexed by unit id
        command_queue       (CommandQueue)  - shared with the command ingestor
        publisher           (object)        - anything with publish(snapshot); optional
        step_ms             (int)           - simulated milliseconds per tick
        reading_interval_ms (int)           - minimum simulated time between snapshots
        tick_seconds        (float)         - real-time pause between ticks
        start_time_ms       (int)           - initial simulated time (defaults to now)
        on_dispatch         (callable)      - called with each applied ControlRecord
        on_error            (callable)      - called with each dispatch error
    """

    IDLE    = 'IDLE'
    RUNNING = 'RUNNING'
    STOPPED = 'STOPPED'

    def __init__(self, incubators, command_queue, publisher=None,
                 step_ms=STEP_MS, reading_interval_ms=READING_INTERVAL_MS,
                 tick_seconds=TICK_SECONDS, start_time_ms=None,
                 room_temperature=ROOM_TEMPERATURE,
                 outside_near=OUTSIDE_TEMPERATURE_NEAR,
                 outside_far=OUTSIDE_TEMPERATURE_FAR,
                 on_dispatch=None, on_error=None):
        self._incubators = list(incubators)
        self._queue = command_queue
        self._publisher = publisher
        self._step_ms = int(step_ms)
        self._reading_interval_ms = int(reading_interval_ms)
        self._tick_seconds = float(tick_seconds)
        self._room_temperature = room_temperature
        self._outside_near = outside_near
        self._outside_far = outside_far
        self.on_dispatch = on_dispatch
        self.on_error = on_error

        if start_time_ms is None:
            start_time_ms = int(time.time() * 1000)
        self._start_time_ms = int(start_time_ms)
        self._current_time_ms = self._start_time_ms
        self._last_reading_ms = None
        self._latest_snapshot = ()

        self._state = self.IDLE
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread = None

    # ========== PUBLIC API ==========

    @property
    def start_time_ms(self):
        return self._start_time_ms

    @property
    def current_time_ms(self):
        return self._current_time_ms

    @property
    def unit_count(self):
        return len(self._incubators)

    @property
    def latest_snapshot(self):
        """Readings from the most recent emission, as an immutable tuple"""
        return self._latest_snapshot

    def get_state(self):
        with self._lock:
            return self._state

    def schedule(self, scenario):
        """Preload (delay_ms, kind, unit_id) events relative to the start time."""
        records = []
        for delay_ms, kind, unit_id in scenario:
            if isinstance(kind, str):
                kind = CommandKind[kind]
            records.append(ControlRecord(self._start_time_ms + delay_ms, kind, unit_id))
        self._queue.extend(records)
        return records

    def start(self):
        with self._lock:
            if self._state != self.IDLE:
                raise RuntimeError(f"Cannot start simulator in state {self._state}")
            self._state = self.RUNNING
            self._thread = threading.Thread(target=self._run, name='incubator-sim', daemon=True)
            self._thread.start()
        print(f"[SIM] Running {len(self._incubators)} incubators "
              f"({self._step_ms} ms every {self._tick_seconds}s)")

    def stop(self, timeout=None):
        """Signal the loop to stop and wait until it has."""
        self._stop_event.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
            if thread.is_alive():
                print("[SIM] Loop did not stop within timeout")
                return False
        with self._lock:
            if self._state != self.STOPPED:
                self._state = self.STOPPED
                print("[SIM] Stopped")
        return True

    def tick(self):
        """
        Run one full advance/dispatch/step/publish cycle.

        Manual ticks are allowed only while IDLE; once RUNNING, only the loop
        thread mutates incubator state.
        """
        state = self.get_state()
        if state == self.STOPPED:
            raise RuntimeError("Simulator is stopped")
        if state == self.RUNNING and threading.current_thread() is not self._thread:
            raise RuntimeError("Simulator is running; tick() belongs to the loop thread")

        self._current_time_ms += self._step_ms

        for record in self._queue.drain_due(self._current_time_ms):
            self._apply(record)

        for incubator in self._incubators:
            incubator.step()

        if (self._last_reading_ms is None or
                self._current_time_ms - self._last_reading_ms > self._reading_interval_ms):
            self._emit_readings()
            self._last_reading_ms = self._current_time_ms

    # ========== INTERNAL ==========

    def _apply(self, record):
        """Dispatch one drained record; nothing raised here may abort the tick."""
        try:
            self._dispatch(record)
        except UnknownUnit as exc:
            print(f"[CMD] Dropped {record}: {exc}")
            self._report(self.on_error, exc)
            return
        self._report(self.on_dispatch, record)

    def _report(self, callback, arg):
        if callback is None:
            return
        try:
            callback(arg)
        except Exception as exc:
            print(f"[ERROR] {getattr(callback, '__name__', 'callback')} failed: {exc}")

    def _run(self):
        while not self._stop_event.is_set():
            try:
                self.tick()
            except Exception as exc:
                print(f"[ERROR] Tick failed at {self._current_time_ms}: {exc}")
            self._stop_event.wait(self._tick_seconds)

    def _dispatch(self, record):
        kind = record.kind
        if kind == CommandKind.DOOR_OPEN:
            open_door(self._incubators, self._outside_near, self._outside_far)
            return
        if kind == CommandKind.DOOR_CLOSED:
            close_door(self._incubators, self._room_temperature)
            return

        incubator = self._unit(record)
        if kind == CommandKind.HEATLAMP_ON:
            incubator.turn_on_heatlamp()
        elif kind == CommandKind.HEATLAMP_OFF:
            incubator.turn_off_heatlamp()
        elif kind == CommandKind.BUST_HEATLAMP:
            incubator.break_heatlamp()
        elif kind == CommandKind.FIX_HEATLAMP:
            incubator.fix_heatlamp()

    def _unit(self, record):
        unit_id = record.unit_id
        if isinstance(unit_id, bool) or not isinstance(unit_id, int):
            raise UnknownUnit(unit_id, record)
        if not 0 <= unit_id < len(self._incubators):
            raise UnknownUnit(unit_id, record)
        return self._incubators[unit_id]

    def _emit_readings(self):
        now = self._current_time_ms
        snapshot = tuple(
            Reading(now, i, incubator.temperature, incubator.heatlamp_state())
            for i, incubator in enumerate(self._incubators)
        )
        self._latest_snapshot = snapshot
        if self._publisher is not None:
            self._publisher.publish(snapshot)
