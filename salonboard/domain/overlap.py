"""
Overlap classification between appointments sharing a column.
"""

from itertools import combinations
from typing import Iterable, List, Tuple

from .models import Appointment


def overlaps(a: Appointment, b: Appointment) -> bool:
    """
    Check whether two appointments intersect in time.

    Intervals are half-open, so an appointment ending at 10:00 does not
    overlap one starting at 10:00.
    """
    return a.start_minutes < b.end_minutes and b.start_minutes < a.end_minutes


def overlapping_pairs(appointments: Iterable[Appointment]) -> List[Tuple[str, str]]:
    """Return the id pairs of every double-booked combination, in input order."""
    return [
        (a.id, b.id)
        for a, b in combinations(list(appointments), 2)
        if overlaps(a, b)
    ]
