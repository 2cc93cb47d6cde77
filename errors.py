"""Errors raised by the incubator simulation core"""


class InvalidParameter(ValueError):
    """Raised when an entity is constructed with an invalid parameter."""


class UnknownUnit(LookupError):
    """A control record references a unit index outside the configured range."""

    def __init__(self, unit_id, record=None):
        self.unit_id = unit_id
        self.record = record
        super().__init__(f"Unknown incubator unit: {unit_id!r}")


class UnknownCommand(ValueError):
    """An inbound command code has no matching command kind."""

    def __init__(self, code):
        self.code = code
        super().__init__(f"Unknown command code: {code!r}")
