"""
Service layer helpers that orchestrate the store and domain logic.
"""

from .board import (
    AppointmentStoreProtocol,
    BlockRequest,
    BoardService,
    BoardView,
    BookingRequest,
    ColumnView,
    SlotTarget,
)

__all__ = [
    "AppointmentStoreProtocol",
    "BlockRequest",
    "BoardService",
    "BoardView",
    "BookingRequest",
    "ColumnView",
    "SlotTarget",
]
