"""
Domain models for appointments placed on the scheduling board.
"""

from dataclasses import dataclass, field, replace
from datetime import date as _date, datetime
from enum import Enum
from typing import Any, Dict, Optional, Union

import pendulum
from pendulum import Date

from .exceptions import InvalidAppointmentError
from .time_grid import to_minutes


class AppointmentStatus(str, Enum):
    """Closed set of appointment states."""
    CONFIRMED = "confirmed"
    PENDING = "pending"
    COMPLETED = "completed"
    BLOCKED = "blocked"
    CANCELLED = "cancelled"


def parse_date(value: Union[str, _date, None]) -> Optional[Date]:
    """Normalize ``YYYY-MM-DD`` strings and plain dates to a pendulum Date."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, Date):
        return value
    if isinstance(value, _date):
        return pendulum.date(value.year, value.month, value.day)
    try:
        return pendulum.from_format(value, "YYYY-MM-DD").date()
    except ValueError as exc:
        raise InvalidAppointmentError(f"Invalid date {value!r}: {exc}") from exc


@dataclass(frozen=True)
class Resource:
    """A bookable column on the board, usually a stylist."""
    id: str
    name: str


@dataclass(frozen=True)
class Appointment:
    """
    An appointment or blocked period owned by one resource.

    Invariant: the start slot is a valid label and the duration is positive.
    The client, service and price fields are payload the layout never reads.
    """
    id: str
    resource_id: str
    date: Optional[Date]
    start_slot: str
    duration_minutes: int
    status: AppointmentStatus = AppointmentStatus.CONFIRMED
    client_name: str = ""
    service: str = ""
    price: float = 0.0
    client_id: Optional[str] = None

    def __post_init__(self):
        # Frozen dataclass: normalize through object.__setattr__
        try:
            object.__setattr__(self, "status", AppointmentStatus(self.status))
        except ValueError as exc:
            raise InvalidAppointmentError(f"Unknown status {self.status!r}") from exc
        object.__setattr__(self, "date", parse_date(self.date))

        if self.duration_minutes <= 0:
            raise InvalidAppointmentError(
                f"Appointment {self.id} has non-positive duration {self.duration_minutes}"
            )
        # Raises InvalidSlotLabelError for malformed labels
        to_minutes(self.start_slot)

    @property
    def start_minutes(self) -> int:
        return to_minutes(self.start_slot)

    @property
    def end_minutes(self) -> int:
        return self.start_minutes + self.duration_minutes

    @property
    def is_blocked(self) -> bool:
        return self.status is AppointmentStatus.BLOCKED

    def moved_to(self, resource_id: str, date: Date, start_slot: str) -> "Appointment":
        """Copy of this appointment at a new column and slot; everything else is kept."""
        return replace(self, resource_id=resource_id, date=date, start_slot=start_slot)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Appointment":
        return cls(
            id=str(data["id"]),
            resource_id=str(data["resource_id"]),
            date=data.get("date"),
            start_slot=data["start_slot"],
            duration_minutes=int(data["duration_minutes"]),
            status=data.get("status", AppointmentStatus.CONFIRMED.value),
            client_name=data.get("client_name", ""),
            service=data.get("service", ""),
            price=float(data.get("price", 0)),
            client_id=data.get("client_id"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "resource_id": self.resource_id,
            "date": self.date.to_date_string() if self.date else None,
            "start_slot": self.start_slot,
            "duration_minutes": self.duration_minutes,
            "status": self.status.value,
            "client_name": self.client_name,
            "service": self.service,
            "price": self.price,
            "client_id": self.client_id,
        }


@dataclass(frozen=True)
class AppointmentDraft:
    """Everything the store needs to create an appointment except its id."""
    resource_id: str
    date: Date
    start_slot: str
    duration_minutes: int
    status: AppointmentStatus
    client_name: str
    service: str
    price: float = 0.0
    client_id: Optional[str] = None

    def with_id(self, appointment_id: str) -> Appointment:
        return Appointment(
            id=appointment_id,
            resource_id=self.resource_id,
            date=self.date,
            start_slot=self.start_slot,
            duration_minutes=self.duration_minutes,
            status=self.status,
            client_name=self.client_name,
            service=self.service,
            price=self.price,
            client_id=self.client_id,
        )


@dataclass(frozen=True)
class StatusStyle:
    """Colour tokens used to paint an appointment rectangle."""
    background: str
    border: str
    text: str
    strike_through: bool = False
    shows_price: bool = True


STATUS_STYLES: Dict[AppointmentStatus, StatusStyle] = {
    AppointmentStatus.BLOCKED: StatusStyle("stone-800", "stone-600", "stone-300", shows_price=False),
    AppointmentStatus.CANCELLED: StatusStyle("red-100", "red-500", "red-900"),
    AppointmentStatus.CONFIRMED: StatusStyle("emerald-100", "emerald-500", "emerald-900"),
    AppointmentStatus.PENDING: StatusStyle("stone-200", "stone-400", "stone-700"),
    AppointmentStatus.COMPLETED: StatusStyle("stone-100", "stone-300", "stone-500", strike_through=True),
}

_unstyled = set(AppointmentStatus) - set(STATUS_STYLES)
if _unstyled:
    raise RuntimeError(f"Statuses without a style: {sorted(s.value for s in _unstyled)}")


def style_for(status: AppointmentStatus) -> StatusStyle:
    return STATUS_STYLES[AppointmentStatus(status)]


@dataclass(frozen=True)
class ServiceOffering:
    """A bookable salon service."""
    name: str
    price: float
    duration_minutes: int


@dataclass(frozen=True)
class ExistingClientRef:
    """Booking for a client already on file."""
    client_id: str
    display_name: str


@dataclass(frozen=True)
class NewClientDraft:
    """
    Booking for a walk-in who still has to be registered.

    Invariant: first name, last name and phone are all present.
    """
    first_name: str
    last_name: str
    phone: str
    notes: str = field(default="", compare=False)

    def __post_init__(self):
        missing = [
            name for name in ("first_name", "last_name", "phone")
            if not getattr(self, name).strip()
        ]
        if missing:
            raise ValueError(f"New client is missing: {', '.join(missing)}")

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


ClientSelection = Union[ExistingClientRef, NewClientDraft]
