"""
In-memory appointment store.

Stands in for the external appointment collection: the board only ever
reads the ordered list, replaces an appointment by id, or creates one.
"""

import json
import logging
import uuid
from pathlib import Path
from typing import Dict, Iterable, List

from ..domain.exceptions import AppointmentNotFoundError, SchedulingError
from ..domain.models import Appointment, AppointmentDraft

logger = logging.getLogger(__name__)


class InMemoryAppointmentStore:
    """
    Ordered appointment collection keyed by id.

    Insertion order is preserved; updates replace in place.
    """

    def __init__(self, appointments: Iterable[Appointment] = ()):
        self._appointments: Dict[str, Appointment] = {}
        for appointment in appointments:
            if appointment.id in self._appointments:
                raise ValueError(f"Duplicate appointment id: {appointment.id}")
            self._appointments[appointment.id] = appointment

    @classmethod
    def from_json_file(cls, data_file: Path) -> "InMemoryAppointmentStore":
        """
        Seed a store from a JSON list of appointment records.

        Invalid records are skipped with a warning.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If the file is not a JSON list
        """
        if not data_file.exists():
            raise FileNotFoundError(f"Appointment file not found: {data_file}")

        with open(data_file, "r", encoding="utf-8") as f:
            try:
                records = json.load(f)
            except json.JSONDecodeError as exc:
                raise ValueError(f"Invalid JSON in {data_file}: {exc}") from exc

        if not isinstance(records, list):
            raise ValueError(f"{data_file} must contain a list of appointments")

        appointments: List[Appointment] = []
        for record in records:
            try:
                appointments.append(Appointment.from_dict(record))
            except (KeyError, TypeError, ValueError, SchedulingError) as exc:
                logger.warning("Skipping invalid appointment record %r: %s", record, exc)

        return cls(appointments)

    def list_appointments(self) -> List[Appointment]:
        return list(self._appointments.values())

    def get(self, appointment_id: str) -> Appointment:
        try:
            return self._appointments[appointment_id]
        except KeyError:
            raise AppointmentNotFoundError(appointment_id) from None

    def update_appointment(self, appointment: Appointment) -> Appointment:
        """Replace the stored appointment with the same id."""
        if appointment.id not in self._appointments:
            raise AppointmentNotFoundError(appointment.id)

        self._appointments[appointment.id] = appointment
        logger.debug("Updated appointment %s", appointment.id)
        return appointment

    def create_appointment(self, draft: AppointmentDraft) -> Appointment:
        appointment_id = self._new_id()
        while appointment_id in self._appointments:
            appointment_id = self._new_id()

        appointment = draft.with_id(appointment_id)
        self._appointments[appointment.id] = appointment
        logger.info(
            "Created %s appointment %s for %s",
            appointment.status.value, appointment.id, appointment.resource_id,
        )
        return appointment

    def delete_appointment(self, appointment_id: str) -> None:
        if self._appointments.pop(appointment_id, None) is None:
            raise AppointmentNotFoundError(appointment_id)

    @staticmethod
    def _new_id() -> str:
        return uuid.uuid4().hex[:9]
