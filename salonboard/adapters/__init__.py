"""
Adapters layer - Appointment store implementations.
"""

from .memory_store import InMemoryAppointmentStore

__all__ = ["InMemoryAppointmentStore"]
