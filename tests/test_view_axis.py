"""
Tests for the view axis resolver.
"""

import pendulum
import pytest

from salonboard.domain.models import Appointment, Resource
from salonboard.domain.view_axis import ViewAxisResolver, ViewMode, WeekStart, week_start_date

RESOURCES = [Resource(id="1", name="Owner"), Resource(id="2", name="Maya"), Resource(id="3", name="Theo")]
WEDNESDAY = pendulum.date(2024, 11, 27)


def _resolver(mode: ViewMode, week_start: WeekStart = WeekStart.ROLLING) -> ViewAxisResolver:
    return ViewAxisResolver(
        mode=mode,
        reference_date=WEDNESDAY,
        resources=RESOURCES,
        my_resource_id="1",
        week_start=week_start,
        today=WEDNESDAY,
    )


def _appt(appt_id: str, resource_id: str, date) -> Appointment:
    return Appointment(
        id=appt_id,
        resource_id=resource_id,
        date=date,
        start_slot="9:00 AM",
        duration_minutes=30,
    )


class TestWeekStart:
    """Tests for week alignment."""

    @pytest.mark.parametrize(
        "week_start, expected",
        [
            (WeekStart.ROLLING, pendulum.date(2024, 11, 27)),
            (WeekStart.SUNDAY, pendulum.date(2024, 11, 24)),
            (WeekStart.MONDAY, pendulum.date(2024, 11, 25)),
            (WeekStart.WEDNESDAY, pendulum.date(2024, 11, 27)),
            (WeekStart.THURSDAY, pendulum.date(2024, 11, 21)),
            (WeekStart.SATURDAY, pendulum.date(2024, 11, 23)),
        ],
    )
    def test_week_start_date(self, week_start, expected):
        """Test snapping back to the configured weekday."""
        assert week_start_date(WEDNESDAY, week_start) == expected

    def test_weekday_numbers(self):
        assert WeekStart.MONDAY.weekday == 0
        assert WeekStart.SUNDAY.weekday == 6
        assert WeekStart.ROLLING.weekday is None


class TestColumns:
    """Tests for column resolution."""

    def test_resource_axis(self):
        """Test one column per resource on the reference date."""
        columns = _resolver(ViewMode.RESOURCE).columns()

        assert [c.resource_id for c in columns] == ["1", "2", "3"]
        assert [c.title for c in columns] == ["Owner", "Maya", "Theo"]
        assert {c.date for c in columns} == {WEDNESDAY}

    def test_date_axis_rolling(self):
        """Test seven consecutive days starting on the reference date."""
        columns = _resolver(ViewMode.DATE).columns()

        assert len(columns) == 7
        assert columns[0].date == WEDNESDAY
        assert columns[-1].date == pendulum.date(2024, 12, 3)
        assert {c.resource_id for c in columns} == {"1"}

    def test_date_axis_fixed_start(self):
        columns = _resolver(ViewMode.DATE, WeekStart.SUNDAY).columns()

        assert columns[0].date == pendulum.date(2024, 11, 24)
        assert columns[0].title.startswith("Sun")

    def test_column_appointments(self):
        """Test filtering by resource and date."""
        resolver = _resolver(ViewMode.RESOURCE)
        appointments = [
            _appt("a", "1", "2024-11-27"),
            _appt("b", "2", "2024-11-27"),
            _appt("c", "1", "2024-11-28"),
        ]

        owner_column = resolver.columns()[0]

        assert [a.id for a in resolver.column_appointments(owner_column, appointments)] == ["a"]

    def test_undated_appointments_belong_to_today(self):
        resolver = _resolver(ViewMode.DATE)
        appointments = [_appt("undated", "1", None)]

        columns = resolver.columns()

        assert [a.id for a in resolver.column_appointments(columns[0], appointments)] == ["undated"]
        assert resolver.column_appointments(columns[1], appointments) == []

    def test_is_today(self):
        resolver = _resolver(ViewMode.DATE)
        columns = resolver.columns()

        assert resolver.is_today(columns[0])
        assert not resolver.is_today(columns[1])


class TestNavigation:
    """Tests for paging."""

    def test_week_paging_in_date_mode(self):
        resolver = _resolver(ViewMode.DATE)

        assert resolver.next_week() == pendulum.date(2024, 12, 4)
        assert resolver.previous_week() == WEDNESDAY
        assert resolver.previous_week() == pendulum.date(2024, 11, 20)

    def test_week_paging_is_noop_in_resource_mode(self):
        """Test that week navigation leaves a team view untouched."""
        resolver = _resolver(ViewMode.RESOURCE)

        assert resolver.next_week() == WEDNESDAY
        assert resolver.previous_week() == WEDNESDAY

    def test_shift_month_and_today(self):
        resolver = _resolver(ViewMode.DATE)

        assert resolver.shift_month(1) == pendulum.date(2024, 12, 27)
        assert resolver.go_to_today() == WEDNESDAY
