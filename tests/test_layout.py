"""
Tests for the column-packing layout engine.
"""

import random
from datetime import time
from typing import List

import pytest

from salonboard.domain.layout import LayoutEngine
from salonboard.domain.models import Appointment
from salonboard.domain.time_grid import TimeGrid, from_minutes


def _appt(appt_id: str, start: str, duration: int, status: str = "confirmed") -> Appointment:
    return Appointment(
        id=appt_id,
        resource_id="1",
        date="2024-11-25",
        start_slot=start,
        duration_minutes=duration,
        status=status,
    )


def _engine() -> LayoutEngine:
    grid = TimeGrid(open_time=time(7, 30), close_time=time(20, 0), granularity_minutes=15)
    return LayoutEngine(grid, row_height_px=48)


def _random_column(rng: random.Random, count: int) -> List[Appointment]:
    return [
        _appt(f"apt-{i}", from_minutes(450 + 15 * rng.randrange(48)), 15 * rng.randrange(1, 9))
        for i in range(count)
    ]


def _max_concurrency(appointments: List[Appointment]) -> int:
    # Ends sort before starts at the same minute (half-open intervals)
    events = sorted(
        [(a.start_minutes, 1) for a in appointments] + [(a.end_minutes, -1) for a in appointments],
        key=lambda e: (e[0], e[1]),
    )
    current = peak = 0
    for _, delta in events:
        current += delta
        peak = max(peak, current)
    return peak


def _merge_reference(appointments: List[Appointment]) -> List[set]:
    """Naive merge-overlapping-intervals partition."""
    groups: List[set] = []
    group_end = None
    for a in sorted(appointments, key=lambda a: a.start_minutes):
        if group_end is not None and a.start_minutes < group_end:
            groups[-1].add(a.id)
            group_end = max(group_end, a.end_minutes)
        else:
            groups.append({a.id})
            group_end = a.end_minutes
    return groups


class TestLayoutEngine:
    """Tests for LayoutEngine."""

    def test_singleton_takes_full_width(self):
        """Test that a lone appointment fills its column."""
        layout = _engine().calculate([_appt("a", "9:00 AM", 45)])

        box = layout["a"]
        assert box.sub_column_count == 1
        assert box.sub_column_index == 0
        assert box.left_percent == 0
        assert box.width_percent == 100

    def test_empty_column(self):
        assert _engine().calculate([]) == {}

    def test_chain_cluster_shares_lanes(self):
        """Test A 9:00-9:45, B 9:15-10:00, C 9:45-10:15: one cluster, two lanes."""
        a = _appt("A", "9:00 AM", 45)
        b = _appt("B", "9:15 AM", 45)
        c = _appt("C", "9:45 AM", 30)

        engine = _engine()
        clusters = engine.build_clusters(engine.sort_for_layout([a, b, c]))
        layout = engine.calculate([a, b, c])

        assert [[x.id for x in cluster] for cluster in clusters] == [["A", "B", "C"]]
        assert {box.sub_column_count for box in layout.values()} == {2}
        assert layout["A"].sub_column_index == 0
        assert layout["C"].sub_column_index == 0
        assert layout["B"].sub_column_index == 1
        assert layout["B"].left_percent == 50
        assert layout["B"].width_percent == 50

    def test_separate_clusters_are_independent(self):
        """Test that a busy morning does not narrow an afternoon appointment."""
        morning = [_appt("m1", "9:00 AM", 60), _appt("m2", "9:00 AM", 60), _appt("m3", "9:30 AM", 60)]
        afternoon = _appt("p1", "2:00 PM", 60)

        layout = _engine().calculate(morning + [afternoon])

        assert layout["m1"].sub_column_count == 3
        assert layout["p1"].sub_column_count == 1
        assert layout["p1"].width_percent == 100

    def test_identical_appointments_get_different_lanes(self):
        a = _appt("a", "10:00 AM", 30)
        b = _appt("b", "10:00 AM", 30)

        layout = _engine().calculate([a, b])

        assert {layout["a"].sub_column_index, layout["b"].sub_column_index} == {0, 1}
        assert layout["a"].sub_column_count == layout["b"].sub_column_count == 2

    def test_longer_appointment_packed_first_on_tie(self):
        """Test that ties on start are broken by descending duration."""
        short = _appt("short", "10:00 AM", 15)
        long = _appt("long", "10:00 AM", 90)

        layout = _engine().calculate([short, long])

        assert layout["long"].sub_column_index == 0
        assert layout["short"].sub_column_index == 1

    def test_blocked_time_takes_grid_space(self):
        """Test that blocked periods collide like real appointments."""
        block = _appt("blk", "12:00 PM", 60, status="blocked")
        appt = _appt("a", "12:30 PM", 30)

        layout = _engine().calculate([block, appt])

        assert layout["blk"].sub_column_count == 2

    def test_vertical_placement(self):
        """Test top and height are derived from start and duration."""
        layout = _engine().calculate([_appt("a", "9:00 AM", 45)])

        assert layout["a"].top_px == 6 * 48
        assert layout["a"].height_px == 3 * 48

    def test_vertical_placement_is_independent_of_clustering(self):
        alone = _engine().calculate([_appt("a", "9:00 AM", 45)])["a"]
        crowded = _engine().calculate([_appt("a", "9:00 AM", 45), _appt("b", "9:00 AM", 60)])["a"]

        assert (alone.top_px, alone.height_px) == (crowded.top_px, crowded.height_px)

    def test_overflow_past_close_is_flagged_not_clipped(self):
        """Test that a block running past the last row keeps its full height."""
        layout = _engine().calculate([_appt("late", "7:30 PM", 60), _appt("edge", "7:45 PM", 30)])

        assert layout["late"].overflows_close
        assert layout["late"].height_px == 4 * 48
        assert not layout["edge"].overflows_close

    @pytest.mark.parametrize("seed", range(10))
    def test_deterministic_for_any_input_order(self, seed):
        """Test that shuffled input yields identical layouts."""
        rng = random.Random(seed)
        appointments = _random_column(rng, 15)
        shuffled = appointments[:]
        rng.shuffle(shuffled)

        engine = _engine()
        assert engine.calculate(appointments) == engine.calculate(shuffled)
        assert engine.calculate(appointments) == engine.calculate(appointments)

    @pytest.mark.parametrize("seed", range(25))
    def test_clusters_match_merged_intervals(self, seed):
        """Test cluster formation against a naive interval-merge on adversarial sets."""
        rng = random.Random(seed)
        appointments = _random_column(rng, rng.randrange(1, 30))

        engine = _engine()
        clusters = engine.build_clusters(engine.sort_for_layout(appointments))

        assert [{a.id for a in cluster} for cluster in clusters] == _merge_reference(appointments)

    @pytest.mark.parametrize("seed", range(25))
    def test_lanes_never_collide(self, seed):
        """Test that appointments sharing a lane never overlap and lanes cover peak concurrency."""
        rng = random.Random(seed)
        appointments = _random_column(rng, rng.randrange(1, 30))

        engine = _engine()
        layout = engine.calculate(appointments)

        for cluster in engine.build_clusters(engine.sort_for_layout(appointments)):
            counts = {layout[a.id].sub_column_count for a in cluster}
            assert len(counts) == 1
            assert counts.pop() >= _max_concurrency(cluster)

        for a in appointments:
            for b in appointments:
                if a.id != b.id and layout[a.id].sub_column_count == layout[b.id].sub_column_count:
                    same_lane = layout[a.id].sub_column_index == layout[b.id].sub_column_index
                    if same_lane and a.start_minutes < b.end_minutes and b.start_minutes < a.end_minutes:
                        pytest.fail(f"{a.id} and {b.id} collide in the same lane")

    def test_pairwise_overlapping_cluster_gets_distinct_offsets(self):
        """Test k mutually overlapping appointments tile the column."""
        cluster = [_appt(f"x{i}", "11:00 AM", 60 + 15 * i) for i in range(4)]

        layout = _engine().calculate(cluster)

        lefts = sorted(box.left_percent for box in layout.values())
        assert lefts == [0, 25, 50, 75]
        assert all(box.width_percent == 25 for box in layout.values())
