"""
Domain-specific exception hierarchy for the scheduling board.
"""


class SchedulingError(Exception):
    """Base class for all board-level errors."""


class InvalidSlotLabelError(SchedulingError, ValueError):
    """Raised when a slot label does not follow the ``H:MM AM/PM`` format."""


class SlotOutOfRangeError(SchedulingError):
    """Raised when a time falls outside the day or outside the configured grid."""


class InvalidAppointmentError(SchedulingError, ValueError):
    """Raised when appointment data cannot be placed on the grid."""


class AppointmentNotFoundError(SchedulingError, KeyError):
    """Raised when the store has no appointment with the requested id."""
