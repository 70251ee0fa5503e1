"""
Tests for the overlap classifier.
"""

import random

import pytest

from salonboard.domain.models import Appointment
from salonboard.domain.overlap import overlapping_pairs, overlaps
from salonboard.domain.time_grid import from_minutes


def _appt(appt_id: str, start: str, duration: int) -> Appointment:
    return Appointment(
        id=appt_id,
        resource_id="1",
        date="2024-11-25",
        start_slot=start,
        duration_minutes=duration,
    )


class TestOverlaps:
    """Tests for the pairwise overlap predicate."""

    def test_partial_overlap(self):
        a = _appt("a", "9:00 AM", 45)
        b = _appt("b", "9:15 AM", 45)

        assert overlaps(a, b)
        assert overlaps(b, a)

    def test_touching_boundaries_do_not_overlap(self):
        """Test the half-open interval rule."""
        a = _appt("a", "9:00 AM", 45)
        c = _appt("c", "9:45 AM", 30)

        assert not overlaps(a, c)
        assert not overlaps(c, a)

    def test_containment(self):
        outer = _appt("outer", "9:00 AM", 120)
        inner = _appt("inner", "10:00 AM", 15)

        assert overlaps(outer, inner)

    def test_self_overlap(self):
        """Test that an appointment with positive duration overlaps itself."""
        a = _appt("a", "9:00 AM", 15)

        assert overlaps(a, a)

    @pytest.mark.parametrize("seed", range(5))
    def test_symmetry(self, seed):
        """Test overlaps(a, b) == overlaps(b, a) on random pairs."""
        rng = random.Random(seed)
        appointments = [
            _appt(str(i), from_minutes(450 + 15 * rng.randrange(40)), 15 * rng.randrange(1, 10))
            for i in range(20)
        ]

        for a in appointments:
            for b in appointments:
                assert overlaps(a, b) == overlaps(b, a)


class TestOverlappingPairs:
    """Tests for the double-booking report."""

    def test_pairs(self):
        a = _appt("a", "9:00 AM", 45)
        b = _appt("b", "9:15 AM", 45)
        c = _appt("c", "9:45 AM", 30)
        d = _appt("d", "1:00 PM", 30)

        assert overlapping_pairs([a, b, c, d]) == [("a", "b"), ("b", "c")]

    def test_no_pairs(self):
        assert overlapping_pairs([_appt("a", "9:00 AM", 30)]) == []
