"""Command ingestor - turns inbound command messages into queued control records"""

from errors import UnknownCommand
from simulators.command_queue import CommandKind, ControlRecord


class CommandIngestor:
    """
    Converts (command code, unit id) pairs from any transport into
    ControlRecords stamped with the current simulated time.

    Inbound commands are applied as soon as the loop sees them, so the
    sender's own timestamp is ignored. Unit ids are range-checked at
    dispatch, where out-of-range units are reported and dropped.

    Parameters:
        command_queue (CommandQueue) - queue shared with the simulation loop
        clock         (object)       - exposes current_time_ms (the simulator)
    """

    def __init__(self, command_queue, clock):
        self._queue = command_queue
        self._clock = clock
        self.received = 0

    def ingest(self, command_code, unit_id=None, arrival_time_ms=None):
        """Enqueue a command for the next tick. Raises UnknownCommand for bad codes."""
        try:
            kind = CommandKind(command_code)
        except ValueError:
            raise UnknownCommand(command_code) from None
        record = ControlRecord(self._clock.current_time_ms, kind, unit_id)
        self._queue.enqueue(record)
        self.received += 1
        return record

    def ingest_payload(self, payload):
        """
        Ingest a decoded message of the form {"time": ms, "command": int, "id": int}.
        Returns the enqueued record, or None if the message was dropped.
        """
        if not isinstance(payload, dict):
            print(f"[CMD] Ignoring malformed command: {payload!r}")
            return None
        try:
            code = int(payload["command"])
            unit_id = payload.get("id")
            if unit_id is not None:
                unit_id = int(unit_id)
        except (KeyError, TypeError, ValueError):
            print(f"[CMD] Ignoring malformed command: {payload!r}")
            return None
        try:
            return self.ingest(code, unit_id, payload.get("time"))
        except UnknownCommand as exc:
            print(f"[CMD] {exc}")
            return None
