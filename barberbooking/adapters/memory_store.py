"""
In-process store and notifier for mock mode and tests.
"""

from __future__ import annotations

import asyncio
import json
import logging
import uuid
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import pendulum

from ..domain.exceptions import SlotConflict, ValidationError
from ..domain.models import Appointment, AppointmentStatus, AvailabilityWindow, Barber
from .rows import AppointmentRow, AvailabilityRow, BarberRow

logger = logging.getLogger(__name__)

DEFAULT_FIXTURE = Path(__file__).parent / "mock_booking_data.json"


class MemoryStore:
    """
    Mock store that keeps barbers, availability windows and appointments
    in memory.

    Every operation yields to the event loop once, like a network round
    trip would, so concurrent bookings interleave the same way they do
    against the hosted backend.

    With ``enforce_unique`` the store rejects a second confirmed appointment
    for the same barber, date and time, as the partial unique index in
    ``sql/001_unique_confirmed_slot.sql`` does. Without it, concurrent
    check-then-insert races can produce duplicates.
    """

    def __init__(
        self,
        barbers: Optional[List[Barber]] = None,
        windows: Optional[List[AvailabilityWindow]] = None,
        appointments: Optional[List[Appointment]] = None,
        enforce_unique: bool = True,
    ):
        self.barbers: Dict[str, Barber] = {b.id: b for b in barbers or []}
        self.windows: Dict[str, AvailabilityWindow] = {}
        self.appointments: Dict[str, Appointment] = {}
        self.enforce_unique = enforce_unique

        for window in windows or []:
            self._put_window(window)
        for appointment in appointments or []:
            self._put_appointment(appointment)

    @classmethod
    def from_fixture(
        cls,
        data_file: Optional[Path] = None,
        enforce_unique: bool = True,
        today: Optional[date] = None,
    ) -> "MemoryStore":
        """
        Load a store from a JSON fixture with ``barbers``, ``availability``
        and ``appointments`` lists shaped like the hosted tables' rows.

        Dates in the fixture may be given as day offsets (``"+1"``) relative
        to ``today`` so the mock data never goes stale. Pass the service's
        local date; it defaults to today in the local timezone.
        """
        path = data_file or DEFAULT_FIXTURE

        with open(path, "r", encoding="utf-8") as f:
            data: Dict[str, Any] = json.load(f)

        today = today or pendulum.today().date()
        barbers = [BarberRow.model_validate(raw).to_domain() for raw in data.get("barbers", [])]
        windows = [
            AvailabilityRow.model_validate(_resolve_offsets(raw, today, ("from_date", "to_date"))).to_domain()
            for raw in data.get("availability", [])
        ]
        appointments = [
            AppointmentRow.model_validate(_resolve_offsets(raw, today, ("appointment_date",))).to_domain()
            for raw in data.get("appointments", [])
        ]

        return cls(
            barbers=barbers,
            windows=windows,
            appointments=appointments,
            enforce_unique=enforce_unique,
        )

    # Availability windows

    async def list_availability_windows(self, barber_id: str) -> List[AvailabilityWindow]:
        await asyncio.sleep(0)
        return [w for w in self.windows.values() if w.barber_id == barber_id]

    async def list_all_availability(self) -> List[AvailabilityWindow]:
        await asyncio.sleep(0)
        return list(self.windows.values())

    async def upsert_availability_window(
        self,
        barber_id: str,
        from_date: date,
        to_date: date,
        start_time: str,
        end_time: str,
        is_available: bool,
    ) -> None:
        await asyncio.sleep(0)
        existing = next(
            (w for w in self.windows.values() if w.natural_key == (barber_id, from_date, to_date)),
            None,
        )
        self._put_window(
            AvailabilityWindow(
                id=existing.id if existing else None,
                barber_id=barber_id,
                from_date=from_date,
                to_date=to_date,
                start_time=start_time,
                end_time=end_time,
                is_available=is_available,
            )
        )

    async def delete_availability_window(self, window_id: str) -> None:
        await asyncio.sleep(0)
        self.windows.pop(window_id, None)

    # Appointments

    async def list_confirmed_appointment_times(self, barber_id: str, day: date) -> List[str]:
        await asyncio.sleep(0)
        return [
            a.appointment_time for a in self.appointments.values()
            if a.is_confirmed and a.barber_id == barber_id and a.appointment_date == day
        ]

    async def find_confirmed_appointment(
        self, barber_id: str, day: date, time: str
    ) -> Optional[Appointment]:
        await asyncio.sleep(0)
        return self._confirmed_at((barber_id, day, time))

    async def insert_appointment(self, appointment: Appointment) -> Appointment:
        await asyncio.sleep(0)
        if self.enforce_unique and appointment.is_confirmed and self._confirmed_at(appointment.slot_key):
            raise SlotConflict(
                appointment.barber_id,
                appointment.appointment_date.isoformat(),
                appointment.appointment_time,
            )
        return self._put_appointment(appointment)

    async def list_appointments(self) -> List[Appointment]:
        await asyncio.sleep(0)
        return sorted(self.appointments.values(), key=lambda a: a.appointment_date, reverse=True)

    async def update_appointment_status(
        self, appointment_id: str, status: AppointmentStatus
    ) -> Appointment:
        await asyncio.sleep(0)
        appointment = self.appointments.get(appointment_id)
        if appointment is None:
            raise ValidationError(f"Appointment not found: {appointment_id}")

        if status == AppointmentStatus.CONFIRMED and self.enforce_unique:
            holder = self._confirmed_at(appointment.slot_key)
            if holder is not None and holder.id != appointment_id:
                raise SlotConflict(
                    appointment.barber_id,
                    appointment.appointment_date.isoformat(),
                    appointment.appointment_time,
                )

        appointment.status = status
        return appointment

    # Barbers

    async def list_active_barbers(self) -> List[Barber]:
        await asyncio.sleep(0)
        return sorted((b for b in self.barbers.values() if b.is_active), key=lambda b: b.name)

    async def get_barber(self, barber_id: str) -> Optional[Barber]:
        await asyncio.sleep(0)
        return self.barbers.get(barber_id)

    # Helpers

    def _confirmed_at(self, slot_key: Tuple[str, date, str]) -> Optional[Appointment]:
        for appointment in self.appointments.values():
            if appointment.is_confirmed and appointment.slot_key == slot_key:
                return appointment
        return None

    def _put_window(self, window: AvailabilityWindow) -> None:
        if window.id is None:
            window = AvailabilityWindow(
                id=str(uuid.uuid4()),
                barber_id=window.barber_id,
                from_date=window.from_date,
                to_date=window.to_date,
                start_time=window.start_time,
                end_time=window.end_time,
                is_available=window.is_available,
            )
        self.windows[window.id] = window

    def _put_appointment(self, appointment: Appointment) -> Appointment:
        # Copy so callers never share state with the store
        stored = Appointment(
            id=appointment.id or str(uuid.uuid4()),
            customer_name=appointment.customer_name,
            customer_email=appointment.customer_email,
            customer_phone=appointment.customer_phone,
            barber_id=appointment.barber_id,
            appointment_date=appointment.appointment_date,
            appointment_time=appointment.appointment_time,
            service_type=appointment.service_type,
            status=appointment.status,
            created_at=appointment.created_at or datetime.now(),
        )
        self.appointments[stored.id] = stored
        return stored


class LoggingNotifier:
    """
    Notifier that logs instead of sending email/SMS.

    Sent notifications are kept in ``sent`` for inspection.
    """

    def __init__(self):
        self.sent: List[Dict[str, str]] = []

    async def notify_booking(
        self, appointment: Appointment, barber_name: str, service_name: str
    ) -> None:
        self.sent.append(
            {
                "appointment_id": appointment.id or "",
                "barber_name": barber_name,
                "service_name": service_name,
            }
        )
        logger.info(
            "Mock notification: %s with %s on %s at %s",
            service_name, barber_name,
            appointment.appointment_date.isoformat(), appointment.appointment_time,
        )


def _resolve_offsets(raw: Dict[str, Any], today: date, keys: Tuple[str, ...]) -> Dict[str, Any]:
    """Replace ``"+N"`` / ``"-N"`` day offsets with ISO dates."""
    resolved = dict(raw)
    for key in keys:
        value = resolved.get(key)
        if isinstance(value, str) and value[:1] in "+-" and value[1:].isdigit():
            resolved[key] = date.fromordinal(today.toordinal() + int(value)).isoformat()
    return resolved
