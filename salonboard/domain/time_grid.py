"""
Time grid model: the fixed sequence of slot labels that makes up a business day.

Slot labels are 12-hour wall-clock strings such as ``"7:30 AM"`` or
``"12:00 PM"``. They are only ever compared through their minute offsets,
never by string order.
"""

import re
from dataclasses import dataclass
from datetime import time
from typing import List

from .exceptions import InvalidSlotLabelError, SlotOutOfRangeError

MINUTES_PER_DAY = 24 * 60

_LABEL_PATTERN = re.compile(r"^(1[0-2]|[1-9]):([0-5][0-9]) (AM|PM)$")


def to_minutes(label: str) -> int:
    """
    Convert a slot label to minutes from midnight.

    12 AM is 0, 12 PM is 720 and the hours 1-11 PM add 720.

    Raises:
        InvalidSlotLabelError: If the label is not in ``H:MM AM/PM`` form
    """
    match = _LABEL_PATTERN.match(label) if isinstance(label, str) else None
    if match is None:
        raise InvalidSlotLabelError(f"Unrecognized slot label: {label!r}")

    hours = int(match.group(1))
    minutes = int(match.group(2))
    period = match.group(3)

    if period == "PM" and hours != 12:
        hours += 12
    if period == "AM" and hours == 12:
        hours = 0

    return hours * 60 + minutes


def from_minutes(total_minutes: int) -> str:
    """
    Convert minutes from midnight back to a slot label.

    Raises:
        SlotOutOfRangeError: If the total falls outside a single day
    """
    if not 0 <= total_minutes < MINUTES_PER_DAY:
        raise SlotOutOfRangeError(
            f"{total_minutes} minutes is outside a single day; "
            "multi-day appointments are not supported"
        )

    hours, minutes = divmod(total_minutes, 60)
    period = "PM" if hours >= 12 else "AM"
    display_hour = hours % 12 or 12

    return f"{display_hour}:{minutes:02d} {period}"


def generate_slots(open_time: time, close_time: time, granularity_minutes: int) -> List[str]:
    """Generate every slot label from open to close, both inclusive."""
    if granularity_minutes <= 0:
        raise ValueError(f"Granularity must be positive, got {granularity_minutes}")

    start = open_time.hour * 60 + open_time.minute
    end = close_time.hour * 60 + close_time.minute

    return [from_minutes(m) for m in range(start, end + 1, granularity_minutes)]


@dataclass(frozen=True)
class TimeGrid:
    """
    The configured business-day grid.

    Invariant: open_time is before close_time and the granularity is positive.
    """
    open_time: time
    close_time: time
    granularity_minutes: int = 15

    def __post_init__(self):
        if self.granularity_minutes <= 0:
            raise ValueError(f"Granularity must be positive, got {self.granularity_minutes}")
        if self.open_time >= self.close_time:
            raise ValueError(
                f"Open time {self.open_time} must be before close time {self.close_time}"
            )

    @property
    def open_minutes(self) -> int:
        return self.open_time.hour * 60 + self.open_time.minute

    @property
    def close_minutes(self) -> int:
        return self.close_time.hour * 60 + self.close_time.minute

    @property
    def grid_end_minutes(self) -> int:
        """Bottom edge of the last row: the close slot still spans one increment."""
        return self.close_minutes + self.granularity_minutes

    def slots(self) -> List[str]:
        """Return the ordered slot labels of this grid."""
        return generate_slots(self.open_time, self.close_time, self.granularity_minutes)

    def to_minutes(self, label: str) -> int:
        return to_minutes(label)

    def from_minutes(self, total_minutes: int) -> str:
        return from_minutes(total_minutes)

    def end_label(self, start_label: str, duration_minutes: int) -> str:
        """Label of the wall-clock time at which an appointment ends."""
        return from_minutes(to_minutes(start_label) + duration_minutes)

    def index_of(self, label: str) -> int:
        """
        Ordinal position of a label on this grid.

        Raises:
            InvalidSlotLabelError: If the label is malformed
            SlotOutOfRangeError: If the label is not one of the grid's slots
        """
        offset = to_minutes(label) - self.open_minutes
        index, remainder = divmod(offset, self.granularity_minutes)

        if offset < 0 or remainder or to_minutes(label) > self.close_minutes:
            raise SlotOutOfRangeError(f"Slot {label!r} is not on the grid")

        return index

    def remaining_slots(self, label: str) -> List[str]:
        """Slots from ``label`` (inclusive) up to closing."""
        return self.slots()[self.index_of(label):]

    def block_duration_options(self, label: str) -> List[int]:
        """
        Durations offered when blocking time from ``label``.

        One option per remaining row, so the longest block fills the grid
        down to the bottom edge of the closing slot.
        """
        remaining = len(self.remaining_slots(label))
        return [i * self.granularity_minutes for i in range(1, remaining + 1)]

    def snap(self, total_minutes: int) -> str:
        """Label of the grid row containing ``total_minutes``, clamped to the grid."""
        offset = max(0, total_minutes - self.open_minutes)
        index = min(offset // self.granularity_minutes, len(self.slots()) - 1)
        return from_minutes(self.open_minutes + index * self.granularity_minutes)
