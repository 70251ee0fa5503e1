"""
Domain layer - Board layout and interaction logic without external dependencies.
"""

from .drag import DragController, DragOutcome, DragResult, DragState, DropTarget, PointerEvent, Rect
from .exceptions import (
    AppointmentNotFoundError,
    InvalidAppointmentError,
    InvalidSlotLabelError,
    SchedulingError,
    SlotOutOfRangeError,
)
from .hit_test import BoardGeometry
from .layout import LayoutBox, LayoutEngine
from .models import (
    Appointment,
    AppointmentDraft,
    AppointmentStatus,
    ClientSelection,
    ExistingClientRef,
    NewClientDraft,
    Resource,
    ServiceOffering,
)
from .overlap import overlapping_pairs, overlaps
from .time_grid import TimeGrid
from .view_axis import Column, ViewAxisResolver, ViewMode, WeekStart

__all__ = [
    "Appointment",
    "AppointmentDraft",
    "AppointmentNotFoundError",
    "AppointmentStatus",
    "BoardGeometry",
    "ClientSelection",
    "Column",
    "DragController",
    "DragOutcome",
    "DragResult",
    "DragState",
    "DropTarget",
    "ExistingClientRef",
    "InvalidAppointmentError",
    "InvalidSlotLabelError",
    "LayoutBox",
    "LayoutEngine",
    "NewClientDraft",
    "PointerEvent",
    "Rect",
    "Resource",
    "SchedulingError",
    "ServiceOffering",
    "SlotOutOfRangeError",
    "TimeGrid",
    "ViewAxisResolver",
    "ViewMode",
    "WeekStart",
    "overlapping_pairs",
    "overlaps",
]
