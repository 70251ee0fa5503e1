"""
View axis resolution: what the board's columns stand for.

In resource mode every resource gets a column for one fixed date ("team
view"). In date mode one resource gets seven consecutive date columns
("my week").
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Sequence

import pendulum
from pendulum import Date

from .models import Appointment, Resource


class ViewMode(str, Enum):
    RESOURCE = "resource"
    DATE = "date"


class WeekStart(str, Enum):
    """First day of the displayed week; ROLLING starts on the reference date itself."""
    ROLLING = "rolling"
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @property
    def weekday(self) -> Optional[int]:
        """Weekday number as in ``date.weekday()`` (0=Monday), None for rolling."""
        if self is WeekStart.ROLLING:
            return None
        return list(WeekStart).index(self) - 1


DAYS_PER_WEEK = 7


@dataclass(frozen=True)
class Column:
    """One board column and the resource/date key used to filter appointments."""
    resource_id: str
    date: Date
    title: str


def week_start_date(reference: Date, week_start: WeekStart) -> Date:
    """Snap back to the most recent ``week_start`` day on or before ``reference``."""
    if week_start.weekday is None:
        return reference
    days_back = (reference.weekday() - week_start.weekday) % DAYS_PER_WEEK
    return reference.subtract(days=days_back)


class ViewAxisResolver:
    """
    Resolves the ordered column list for the current view and navigates it.

    The reference date is the only navigation state.
    """

    def __init__(
        self,
        mode: ViewMode,
        reference_date: Date,
        resources: Sequence[Resource],
        my_resource_id: str,
        week_start: WeekStart = WeekStart.ROLLING,
        today: Optional[Date] = None,
    ):
        self.mode = ViewMode(mode)
        self.reference_date = reference_date
        self.resources = list(resources)
        self.my_resource_id = my_resource_id
        self.week_start = WeekStart(week_start)
        self.today = today or pendulum.today().date()

    def columns(self) -> List[Column]:
        """Return the columns in display order."""
        if self.mode is ViewMode.RESOURCE:
            return [
                Column(resource_id=resource.id, date=self.reference_date, title=resource.name)
                for resource in self.resources
            ]

        first_day = week_start_date(self.reference_date, self.week_start)
        days = [first_day.add(days=offset) for offset in range(DAYS_PER_WEEK)]

        return [
            Column(resource_id=self.my_resource_id, date=day, title=day.format("ddd D"))
            for day in days
        ]

    def column_appointments(
        self,
        column: Column,
        appointments: Iterable[Appointment],
    ) -> List[Appointment]:
        """
        Appointments that belong to ``column``.

        Undated appointments are treated as belonging to today.
        """
        return [
            appointment for appointment in appointments
            if appointment.resource_id == column.resource_id
            and (appointment.date or self.today) == column.date
        ]

    def is_today(self, column: Column) -> bool:
        return column.date == self.today

    def next_week(self) -> Date:
        return self._shift_week(1)

    def previous_week(self) -> Date:
        return self._shift_week(-1)

    def shift_month(self, offset: int) -> Date:
        """Jump by whole months, as the month picker does."""
        self.reference_date = self.reference_date.add(months=offset)
        return self.reference_date

    def go_to_today(self) -> Date:
        self.reference_date = self.today
        return self.reference_date

    def _shift_week(self, direction: int) -> Date:
        # Week paging has no meaning when columns are resources
        if self.mode is ViewMode.DATE:
            self.reference_date = self.reference_date.add(days=direction * DAYS_PER_WEEK)
        return self.reference_date
