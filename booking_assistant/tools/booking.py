"""
Mock appointment store.

In production, this would be a database table keyed on customer, service
and start time. Creation is idempotent so a retried webhook delivery never
double-books.
"""

import logging
import re
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional, Protocol

from booking_assistant.schemas.booking_schema import AppointmentRecord, AppointmentStatus

logger = logging.getLogger(__name__)

_DATE_PARAM_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class AppointmentStore(Protocol):
    """What the inbound handler needs from an appointment backend."""

    def create_if_absent(
        self, customer_id: str, customer_name: str, service: str, start_time: datetime
    ) -> AppointmentRecord:
        ...


class InMemoryAppointmentStore:
    """Dict-backed appointment store."""

    def __init__(self) -> None:
        self._appointments: dict[str, AppointmentRecord] = {}

    def _find_active(
        self, customer_id: str, service: str, start_time: datetime
    ) -> Optional[AppointmentRecord]:
        for record in self._appointments.values():
            if (
                record.customer_id == customer_id
                and record.service == service
                and record.start_time == start_time
                and record.status != AppointmentStatus.CANCELED
            ):
                return record
        return None

    def create_if_absent(
        self, customer_id: str, customer_name: str, service: str, start_time: datetime
    ) -> AppointmentRecord:
        """Return the live appointment for this slot, creating it if needed."""
        existing = self._find_active(customer_id, service, start_time)
        if existing is not None:
            logger.info("Appointment %s already exists, reusing it", existing.id)
            return existing

        record = AppointmentRecord(
            id=f"AP-{uuid.uuid4().hex[:8].upper()}",
            customer_id=customer_id,
            customer_name=customer_name,
            service=service,
            start_time=start_time,
            status=AppointmentStatus.PENDING,
            created_at=datetime.now(timezone.utc),
        )
        self._appointments[record.id] = record
        logger.info(
            "Appointment created: %s (%s) for %s at %s",
            record.id, service, customer_name, start_time.isoformat(),
        )
        return record

    def get(self, appointment_id: str) -> Optional[AppointmentRecord]:
        return self._appointments.get(appointment_id)

    def _set_status(
        self, appointment_id: str, status: AppointmentStatus
    ) -> Optional[AppointmentRecord]:
        appointment_id = appointment_id.strip()
        record = self._appointments.get(appointment_id)
        if record is None:
            return None
        updated = record.model_copy(update={"status": status})
        self._appointments[appointment_id] = updated
        logger.info("Appointment %s marked %s", appointment_id, status.value)
        return updated

    def confirm(self, appointment_id: str) -> Optional[AppointmentRecord]:
        """Mark an appointment CONFIRMED. Returns None if it does not exist."""
        return self._set_status(appointment_id, AppointmentStatus.CONFIRMED)

    def cancel(self, appointment_id: str) -> Optional[AppointmentRecord]:
        """Mark an appointment CANCELED, freeing its slot for a new booking."""
        return self._set_status(appointment_id, AppointmentStatus.CANCELED)

    def list_appointments(self, date: Optional[str] = None) -> list[AppointmentRecord]:
        """
        List appointments.

        With a 'YYYY-MM-DD' date, returns that UTC day's appointments in
        ascending start order; without one, all appointments newest first.

        Raises:
            ValueError: If date is not in 'YYYY-MM-DD' form.
        """
        records = list(self._appointments.values())
        if date is None:
            return sorted(records, key=lambda r: r.start_time, reverse=True)

        if not _DATE_PARAM_RE.match(date):
            raise ValueError("Invalid 'date' format. Use YYYY-MM-DD.")
        start = datetime.strptime(date, "%Y-%m-%d").replace(tzinfo=timezone.utc)
        end = start + timedelta(days=1)
        return sorted(
            (r for r in records if start <= r.start_time < end),
            key=lambda r: r.start_time,
        )

    def reset(self) -> None:
        """Clear all appointments. Used by test fixtures for isolation."""
        self._appointments.clear()
