"""
Application service for one rendered scheduling board.

The service wires the view axis, layout engine and drag controller to an
external appointment store. The store dependency is expressed as a protocol
so tests can plug in the in-memory implementation or a stub.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, FrozenSet, List, Optional, Protocol, Sequence, Tuple, Union

from pendulum import Date

from ..domain.drag import DragController, DragResult, PointerEvent, Rect
from ..domain.exceptions import AppointmentNotFoundError, InvalidAppointmentError
from ..domain.hit_test import BoardGeometry
from ..domain.layout import LayoutBox, LayoutEngine
from ..domain.models import (
    Appointment,
    AppointmentDraft,
    AppointmentStatus,
    ClientSelection,
    ExistingClientRef,
    NewClientDraft,
    ServiceOffering,
)
from ..domain.overlap import overlapping_pairs
from ..domain.time_grid import TimeGrid
from ..domain.view_axis import Column, ViewAxisResolver

logger = logging.getLogger(__name__)

BLOCKED_SERVICE = "Blocked"
BLOCKED_DEFAULT_NOTE = "Blocked Time"


class AppointmentStoreProtocol(Protocol):
    """Protocol describing the appointment store behaviour needed by the board."""

    def list_appointments(self) -> List[Appointment]:
        """Return all appointments in display order."""

    def update_appointment(self, appointment: Appointment) -> Appointment:
        """Replace the appointment with the same id."""

    def create_appointment(self, draft: AppointmentDraft) -> Appointment:
        """Store a new appointment and return it with its id."""


@dataclass(frozen=True)
class SlotTarget:
    """A clicked grid cell."""
    resource_id: str
    date: Date
    slot: str


@dataclass(frozen=True)
class BlockRequest:
    target: SlotTarget
    duration_options: List[int]


@dataclass(frozen=True)
class BookingRequest:
    target: SlotTarget
    services: List[ServiceOffering]


SlotRequest = Union[BlockRequest, BookingRequest]


@dataclass(frozen=True)
class ColumnView:
    """
    A column with its appointments and their computed boxes.

    ``dimmed`` holds the id of an appointment being dragged out of this column.
    """
    column: Column
    appointments: List[Appointment]
    layout: Dict[str, LayoutBox]
    is_today: bool = False
    dimmed: FrozenSet[str] = frozenset()

    def placed(self) -> List[Tuple[Appointment, LayoutBox]]:
        """Appointments paired with their boxes, top to bottom."""
        return sorted(
            ((a, self.layout[a.id]) for a in self.appointments),
            key=lambda pair: (pair[1].top_px, pair[1].left_percent),
        )


@dataclass(frozen=True)
class BoardView:
    columns: List[ColumnView]
    slots: List[str]
    ghost: Optional[Rect] = None


class BoardService:
    """
    Orchestrates rendering and rescheduling for one board.

    Each board owns its own drag controller, so two boards rendered side by
    side never share a drag session.
    """

    def __init__(
        self,
        store: AppointmentStoreProtocol,
        grid: TimeGrid,
        resolver: ViewAxisResolver,
        *,
        row_height_px: float = 48,
        column_width_px: float = 140,
        header_height_px: float = 40,
        services: Sequence[ServiceOffering] = (),
        register_client: Optional[Callable[[NewClientDraft], str]] = None,
    ) -> None:
        self._store = store
        self._grid = grid
        self._resolver = resolver
        self._layout_engine = LayoutEngine(grid, row_height_px=row_height_px)
        self._row_height_px = row_height_px
        self._column_width_px = column_width_px
        self._header_height_px = header_height_px
        self._services = list(services)
        self._register_client = register_client
        self._drag = DragController(on_commit=self._store.update_appointment)

    @property
    def grid(self) -> TimeGrid:
        return self._grid

    @property
    def resolver(self) -> ViewAxisResolver:
        return self._resolver

    @property
    def drag(self) -> DragController:
        return self._drag

    def render(self) -> BoardView:
        """Recompute every column's layout from the store's current data."""
        appointments = self._store.list_appointments()
        column_views: List[ColumnView] = []

        for column in self._resolver.columns():
            column_appointments = self._resolver.column_appointments(column, appointments)
            column_views.append(
                ColumnView(
                    column=column,
                    appointments=column_appointments,
                    layout=self._layout_engine.calculate(column_appointments),
                    is_today=self._resolver.is_today(column),
                    dimmed=frozenset(a.id for a in column_appointments if self._drag.is_dragging(a.id)),
                )
            )

        return BoardView(columns=column_views, slots=self._grid.slots(), ghost=self._drag.ghost())

    def geometry(self) -> BoardGeometry:
        return BoardGeometry(
            grid=self._grid,
            columns=self._resolver.columns(),
            column_width_px=self._column_width_px,
            row_height_px=self._row_height_px,
            header_height_px=self._header_height_px,
        )

    def appointment_rect(self, appointment_id: str) -> Rect:
        """Pixel rectangle of a visible appointment."""
        board = self.render()
        geometry = self.geometry()

        for index, column_view in enumerate(board.columns):
            box = column_view.layout.get(appointment_id)
            if box is not None:
                return geometry.rect_for(box, index)

        raise AppointmentNotFoundError(appointment_id)

    def press(self, appointment_id: str, event: PointerEvent) -> bool:
        """Pointer-down on a rendered appointment."""
        appointment = self._find(appointment_id)
        return self._drag.press(appointment, event, self.appointment_rect(appointment_id))

    def move(self, event: PointerEvent) -> None:
        self._drag.move(event)

    def release(self, event: PointerEvent) -> DragResult:
        return self._drag.release(event, self.geometry())

    def reschedule(self, appointment_id: str, resource_id: str, date: Date, slot: str) -> Appointment:
        """
        Move an appointment without a pointer gesture.

        Raises:
            AppointmentNotFoundError: If the id is unknown
            SlotOutOfRangeError: If the slot is not on the grid
        """
        self._grid.index_of(slot)
        moved = self._find(appointment_id).moved_to(resource_id, date, slot)
        self._store.update_appointment(moved)
        logger.info("Rescheduled %s to %s on %s at %s", moved.id, resource_id, date, slot)
        return moved

    def click_slot(self, resource_id: str, date: Date, slot: str, blocking: bool = False) -> SlotRequest:
        """
        A click on an empty cell opens either the block-time or the booking form.
        """
        target = SlotTarget(resource_id=resource_id, date=date, slot=slot)
        if blocking:
            return BlockRequest(target=target, duration_options=self._grid.block_duration_options(slot))
        self._grid.index_of(slot)
        return BookingRequest(target=target, services=list(self._services))

    def create_block(self, target: SlotTarget, duration_minutes: int, note: str = "") -> Appointment:
        """
        Block time from the clicked slot.

        Raises:
            InvalidAppointmentError: If the duration runs past the grid
        """
        options = self._grid.block_duration_options(target.slot)
        if duration_minutes not in options:
            raise InvalidAppointmentError(
                f"Block of {duration_minutes} minutes from {target.slot} does not fit the grid"
            )

        draft = AppointmentDraft(
            resource_id=target.resource_id,
            date=target.date,
            start_slot=target.slot,
            duration_minutes=duration_minutes,
            status=AppointmentStatus.BLOCKED,
            client_name=note.strip() or BLOCKED_DEFAULT_NOTE,
            service=BLOCKED_SERVICE,
            price=0,
        )
        return self._store.create_appointment(draft)

    def book(self, target: SlotTarget, service_name: str, client: ClientSelection) -> Appointment:
        """
        Book a confirmed appointment for an existing or a new client.

        Raises:
            ValueError: If the service is not in the catalogue
        """
        service = self._find_service(service_name)

        if isinstance(client, ExistingClientRef):
            client_id: Optional[str] = client.client_id
        else:
            client_id = self._register_client(client) if self._register_client else None

        draft = AppointmentDraft(
            resource_id=target.resource_id,
            date=target.date,
            start_slot=target.slot,
            duration_minutes=service.duration_minutes,
            status=AppointmentStatus.CONFIRMED,
            client_name=client.display_name,
            service=service.name,
            price=service.price,
            client_id=client_id,
        )
        return self._store.create_appointment(draft)

    def double_bookings(self) -> Dict[str, List[Tuple[str, str]]]:
        """Overlapping id pairs per visible column title; clean columns are omitted."""
        report: Dict[str, List[Tuple[str, str]]] = {}
        for column_view in self.render().columns:
            pairs = overlapping_pairs(LayoutEngine.sort_for_layout(column_view.appointments))
            if pairs:
                report[column_view.column.title] = pairs
        return report

    def _find(self, appointment_id: str) -> Appointment:
        for appointment in self._store.list_appointments():
            if appointment.id == appointment_id:
                return appointment
        raise AppointmentNotFoundError(appointment_id)

    def _find_service(self, name: str) -> ServiceOffering:
        for service in self._services:
            if service.name.lower() == name.lower():
                return service
        raise ValueError(f"Unknown service: {name!r}")
