"""Control records and the thread-safe queue shared with command ingestion"""

import threading
from collections import namedtuple
from datetime import datetime, timezone
from enum import IntEnum


class CommandKind(IntEnum):
    """Control commands, valued by their wire encoding"""

    HEATLAMP_ON = 1
    HEATLAMP_OFF = 2
    DOOR_OPEN = 3
    DOOR_CLOSED = 4
    BUST_HEATLAMP = 5
    FIX_HEATLAMP = 6

    @property
    def is_room_wide(self):
        return self in (CommandKind.DOOR_OPEN, CommandKind.DOOR_CLOSED)


class ControlRecord(namedtuple('ControlRecord', ['scheduled_time_ms', 'kind', 'unit_id'])):
    """
    A time-stamped control command.

    Inbound network commands carry the unit they target; room-wide commands
    (door open/closed) have unit_id None.
    """

    __slots__ = ()

    def __new__(cls, scheduled_time_ms, kind, unit_id=None):
        kind = CommandKind(kind)
        if kind.is_room_wide:
            unit_id = None
        return super().__new__(cls, int(scheduled_time_ms), kind, unit_id)

    @classmethod
    def heatlamp_on(cls, time_ms, unit_id):
        return cls(time_ms, CommandKind.HEATLAMP_ON, unit_id)

    @classmethod
    def heatlamp_off(cls, time_ms, unit_id):
        return cls(time_ms, CommandKind.HEATLAMP_OFF, unit_id)

    @classmethod
    def door_open(cls, time_ms):
        return cls(time_ms, CommandKind.DOOR_OPEN)

    @classmethod
    def door_closed(cls, time_ms):
        return cls(time_ms, CommandKind.DOOR_CLOSED)

    @classmethod
    def bust_heatlamp(cls, time_ms, unit_id):
        return cls(time_ms, CommandKind.BUST_HEATLAMP, unit_id)

    @classmethod
    def fix_heatlamp(cls, time_ms, unit_id):
        return cls(time_ms, CommandKind.FIX_HEATLAMP, unit_id)

    def __str__(self):
        target = 'room' if self.unit_id is None else self.unit_id
        try:
            when = datetime.fromtimestamp(self.scheduled_time_ms / 1000, tz=timezone.utc)
            when = when.isoformat(timespec='milliseconds')
        except (ValueError, OverflowError, OSError):
            when = f"{self.scheduled_time_ms} ms"
        return f"({when}, {target}, {self.kind.name})"


class CommandQueue:
    """
    Pending control records shared by the ingestion thread and the simulation loop.

    All access goes through one lock; callers never see contention. Records
    are kept unsorted, so records drained together come back in no particular
    time order.
    """

    def __init__(self, records=None):
        self._lock = threading.Lock()
        self._records = list(records) if records else []

    def enqueue(self, record):
        with self._lock:
            self._records.append(record)

    def extend(self, records):
        records = list(records)
        with self._lock:
            self._records.extend(records)

    def drain_due(self, now_ms):
        """Remove and return every record scheduled strictly before now_ms."""
        with self._lock:
            due = []
            pending = []
            for record in self._records:
                if record.scheduled_time_ms < now_ms:
                    due.append(record)
                else:
                    pending.append(record)
            self._records = pending
        return due

    def __len__(self):
        with self._lock:
            return len(self._records)
