"""
Pointer-driven drag-to-reschedule.

The controller is a two-state machine (idle/dragging) owned by one board.
Pointer moves only update the tracked coordinates; the appointment store is
written exactly once, on a release over a valid drop target.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Optional, Protocol, Sequence

from pendulum import Date

from .exceptions import AppointmentNotFoundError
from .models import Appointment

logger = logging.getLogger(__name__)

PRIMARY_BUTTON = 0


class DragState(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


class DragOutcome(str, Enum):
    COMMITTED = "committed"
    DISCARDED = "discarded"
    CLICKED = "clicked"
    IGNORED = "ignored"


@dataclass(frozen=True)
class PointerEvent:
    x: float
    y: float
    button: int = PRIMARY_BUTTON
    pointer_type: str = "mouse"


@dataclass(frozen=True)
class Rect:
    left: float
    top: float
    width: float
    height: float


@dataclass(frozen=True)
class DropTarget:
    """Column and slot identity carried by a grid cell."""
    resource_id: str
    date: Optional[Date]
    slot: str

    @property
    def is_complete(self) -> bool:
        return bool(self.resource_id and self.date and self.slot)


class DropTargetLocator(Protocol):
    """Returns the element stack under a point, topmost first."""

    def targets_at(self, x: float, y: float) -> Sequence[Optional[DropTarget]]:
        """Entries are None for elements that carry no slot identity."""


@dataclass(frozen=True)
class DragSession:
    """Ephemeral record of one in-progress drag."""
    snapshot: Appointment
    offset_x: float
    offset_y: float
    x: float
    y: float
    width: float
    height: float
    moved: bool = False

    @property
    def appointment_id(self) -> str:
        return self.snapshot.id


@dataclass(frozen=True)
class DragResult:
    outcome: DragOutcome
    appointment: Optional[Appointment] = None


class DragController:
    """
    Owns at most one drag session.

    Args:
        on_commit: Called with the rewritten appointment when a drop succeeds
    """

    def __init__(self, on_commit: Callable[[Appointment], None]):
        self._on_commit = on_commit
        self._session: Optional[DragSession] = None

    @property
    def state(self) -> DragState:
        return DragState.DRAGGING if self._session else DragState.IDLE

    @property
    def session(self) -> Optional[DragSession]:
        return self._session

    def is_dragging(self, appointment_id: str) -> bool:
        return self._session is not None and self._session.appointment_id == appointment_id

    def press(self, appointment: Appointment, event: PointerEvent, rect: Rect) -> bool:
        """
        Start dragging ``appointment``.

        Mouse presses other than the primary button are ignored, as is any
        press while another drag is still pending.
        """
        if event.pointer_type == "mouse" and event.button != PRIMARY_BUTTON:
            return False
        if self._session is not None:
            logger.debug(
                "Ignoring press on %s; drag of %s still pending",
                appointment.id, self._session.appointment_id,
            )
            return False

        self._session = DragSession(
            snapshot=appointment,
            offset_x=event.x - rect.left,
            offset_y=event.y - rect.top,
            x=event.x,
            y=event.y,
            width=rect.width,
            height=rect.height,
        )
        logger.debug("Drag started for %s", appointment.id)
        return True

    def move(self, event: PointerEvent) -> None:
        """Track the pointer; never touches appointment data."""
        session = self._session
        if session is None:
            return

        moved = session.moved or (event.x, event.y) != (session.x, session.y)
        self._session = replace(session, x=event.x, y=event.y, moved=moved)

    def release(self, event: PointerEvent, locator: DropTargetLocator) -> DragResult:
        """
        Finish the gesture and destroy the session.

        A release without any movement is a click and never reschedules. A drop
        whose appointment was deleted while dragging is discarded.
        """
        session = self._session
        if session is None:
            return DragResult(DragOutcome.IGNORED)

        self._session = None

        if not session.moved:
            return DragResult(DragOutcome.CLICKED, session.snapshot)

        target = self._find_target(locator.targets_at(event.x, event.y))
        if target is None:
            logger.warning("Drop of %s discarded: no slot under pointer", session.appointment_id)
            return DragResult(DragOutcome.DISCARDED, session.snapshot)

        moved = session.snapshot.moved_to(target.resource_id, target.date, target.slot)
        try:
            self._on_commit(moved)
        except AppointmentNotFoundError:
            logger.warning("Drop of %s discarded: appointment no longer exists", session.appointment_id)
            return DragResult(DragOutcome.DISCARDED, session.snapshot)
        logger.info(
            "Rescheduled %s to %s on %s at %s",
            moved.id, moved.resource_id, moved.date, moved.start_slot,
        )
        return DragResult(DragOutcome.COMMITTED, moved)

    def ghost(self) -> Optional[Rect]:
        """Floating rectangle following the pointer, offset-corrected."""
        session = self._session
        if session is None:
            return None
        return Rect(
            left=session.x - session.offset_x,
            top=session.y - session.offset_y,
            width=session.width,
            height=session.height,
        )

    @staticmethod
    def _find_target(stack: Sequence[Optional[DropTarget]]) -> Optional[DropTarget]:
        for element in stack:
            if element is not None and element.is_complete:
                return element
        return None
