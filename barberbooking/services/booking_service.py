"""
Application services for resolving slots and committing bookings.

The service coordinates reads and writes through a store adapter and
delegates slot computation to the pure domain functions. Store and notifier
are expressed as protocols so the hosted backend, the in-memory store or a
test stub can be plugged in.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol

import pendulum

from ..config import AppConfig
from ..domain.availability import AvailabilityResolver
from ..domain.booking_filter import classify_slots, is_slot_in_past
from ..domain.exceptions import SlotConflict, ValidationError
from ..domain.models import Appointment, AppointmentStatus, AvailabilityWindow, Barber, TimeSlot
from .appointment_queries import filter_appointments, parse_status, sort_appointments
from .booking_request import BookingRequest, normalize_phone, parse_booking_request

logger = logging.getLogger(__name__)


class AppointmentStoreProtocol(Protocol):
    """Operations the booking core needs from the hosted data store."""

    async def list_availability_windows(self, barber_id: str) -> List[AvailabilityWindow]:
        """Return every availability window of one barber."""

    async def list_all_availability(self) -> List[AvailabilityWindow]:
        """Return the availability windows of all barbers."""

    async def upsert_availability_window(
        self,
        barber_id: str,
        from_date: date,
        to_date: date,
        start_time: str,
        end_time: str,
        is_available: bool,
    ) -> None:
        """Update the window with this barber/from/to key, or insert one."""

    async def delete_availability_window(self, window_id: str) -> None:
        """Delete one availability window."""

    async def list_confirmed_appointment_times(self, barber_id: str, day: date) -> List[str]:
        """Return ``HH:MM`` times of confirmed appointments for a barber and day."""

    async def find_confirmed_appointment(
        self, barber_id: str, day: date, time: str
    ) -> Optional[Appointment]:
        """Return the confirmed appointment holding this slot, if any."""

    async def insert_appointment(self, appointment: Appointment) -> Appointment:
        """Insert and return the stored appointment; SlotConflict on uniqueness violation."""

    async def list_appointments(self) -> List[Appointment]:
        """Return all appointments."""

    async def update_appointment_status(
        self, appointment_id: str, status: AppointmentStatus
    ) -> Appointment:
        """Change an appointment's status and return the updated record."""

    async def list_active_barbers(self) -> List[Barber]:
        """Return the barbers customers can book."""

    async def get_barber(self, barber_id: str) -> Optional[Barber]:
        """Return one barber by id."""


class NotifierProtocol(Protocol):
    """Out-of-band delivery of booking confirmations."""

    async def notify_booking(
        self, appointment: Appointment, barber_name: str, service_name: str
    ) -> None:
        """Send the confirmation; raise NotificationFailure on failure."""


class BookingService:
    """
    Orchestrates slot resolution, booking commits and admin operations.

    Slot computation is synchronous and pure; every store call is awaited.
    No state is shared between calls, so one instance can serve many sessions.
    """

    def __init__(
        self,
        store: AppointmentStoreProtocol,
        config: AppConfig,
        notifier: Optional[NotifierProtocol] = None,
        resolver: Optional[AvailabilityResolver] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._store = store
        self._config = config
        self._notifier = notifier
        self._resolver = resolver or AvailabilityResolver()
        self._clock = clock or (lambda: pendulum.now(config.timezone))

    def now(self) -> datetime:
        """Current local wall-clock time."""
        return self._clock()

    async def get_day_slots(
        self,
        barber_id: str,
        day: date,
        now: Optional[datetime] = None,
    ) -> List[TimeSlot]:
        """
        Resolve and classify the bookable slots for one barber and day.

        An empty list means the barber has no hours that day.
        """
        now = now or self.now()

        windows = await self._store.list_availability_windows(barber_id)
        raw_slots = self._resolver.resolve_day_slots(windows, barber_id, day)

        if not raw_slots:
            logger.debug("No availability for barber %s on %s", barber_id, day)
            return []

        booked_times = await self._store.list_confirmed_appointment_times(barber_id, day)

        return classify_slots(raw_slots, booked_times, day, now)

    async def book(self, request: BookingRequest | Mapping[str, Any]) -> Appointment:
        """
        Validate and commit a booking.

        The slot is re-checked right before the insert to narrow the window
        between slot display and submission. Two concurrent submissions can
        still both pass the check; the store's unique index turns the second
        insert into a SlotConflict.

        Raises:
            ValidationError: Malformed request, past slot, date beyond the horizon,
                unknown or inactive barber, or a time the barber does not offer
            SlotConflict: The slot is already confirmed-booked
            StoreUnavailable: The store could not be reached
        """
        if not isinstance(request, BookingRequest):
            request = parse_booking_request(dict(request))

        self._validate_schedule(request, self.now())

        barber_id = request.barber_id
        day = request.appointment_date
        time = request.appointment_time

        barber = await self._store.get_barber(barber_id)
        if barber is None or not barber.is_active:
            raise ValidationError(f"barber_id: Barber '{barber_id}' is not available for booking")

        windows = await self._store.list_availability_windows(barber_id)
        if time not in self._resolver.resolve_day_slots(windows, barber_id, day):
            raise ValidationError(
                f"appointment_time: {time} is not an open slot for this barber on {day.isoformat()}"
            )

        existing = await self._store.find_confirmed_appointment(barber_id, day, time)
        if existing is not None:
            logger.info("Slot %s %s for barber %s already booked", day, time, barber_id)
            raise SlotConflict(barber_id, day.isoformat(), time)

        appointment = Appointment(
            customer_name=request.customer_name,
            customer_email=request.customer_email,
            customer_phone=normalize_phone(
                request.customer_phone, self._config.booking.default_country_code
            ),
            barber_id=barber_id,
            appointment_date=day,
            appointment_time=time,
            service_type=request.service_type,
            status=AppointmentStatus.CONFIRMED,
        )

        try:
            saved = await self._store.insert_appointment(appointment)
        except SlotConflict:
            logger.warning(
                "Concurrent booking rejected by store for barber %s at %s %s", barber_id, day, time
            )
            raise

        logger.info("Booked appointment %s for barber %s at %s %s", saved.id, barber_id, day, time)

        await self._dispatch_notification(saved, barber)
        return saved

    def _validate_schedule(self, request: BookingRequest, now: datetime) -> None:
        today = now.date()
        day = request.appointment_date
        horizon = self._config.booking.max_days_ahead

        if day < today:
            raise ValidationError("appointment_date: Date is in the past")
        if (day - today).days > horizon:
            raise ValidationError(
                f"appointment_date: Bookings open at most {horizon} days ahead"
            )
        if is_slot_in_past(day, request.appointment_time, now):
            raise ValidationError("appointment_time: Time has already passed")

    async def _dispatch_notification(self, appointment: Appointment, barber: Barber) -> None:
        """Send the confirmation without ever failing the committed booking."""
        if self._notifier is None or not self._config.notifications.enabled:
            return

        try:
            service_name = self._config.service_name(appointment.service_type)
            await self._notifier.notify_booking(appointment, barber.name, service_name)
        except Exception:
            logger.warning(
                "Booking notification failed for appointment %s", appointment.id, exc_info=True
            )

    # Admin operations

    async def set_availability(
        self,
        barber_id: str,
        from_date: date,
        to_date: date,
        start_time: str,
        end_time: str,
        is_available: bool = True,
    ) -> AvailabilityWindow:
        """
        Create or replace the window keyed by barber and date range.

        Last write wins; there is no optimistic concurrency check.
        """
        try:
            window = AvailabilityWindow(
                barber_id=barber_id,
                from_date=from_date,
                to_date=to_date,
                start_time=start_time,
                end_time=end_time,
                is_available=is_available,
            )
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc

        await self._store.upsert_availability_window(
            window.barber_id,
            window.from_date,
            window.to_date,
            window.start_time,
            window.end_time,
            window.is_available,
        )
        logger.info("Availability set for barber %s: %s", barber_id, window)
        return window

    async def delete_availability(self, window_id: str) -> None:
        await self._store.delete_availability_window(window_id)
        logger.info("Availability window %s deleted", window_id)

    async def list_availability(self, barber_id: str) -> List[AvailabilityWindow]:
        windows = await self._store.list_availability_windows(barber_id)
        return sorted(windows, key=lambda w: (w.from_date, w.to_date))

    async def list_barbers(self) -> List[Barber]:
        return await self._store.list_active_barbers()

    async def barbers_available_on(self, day: Optional[date] = None) -> Dict[str, bool]:
        """Map each active barber id to whether any window covers the day."""
        day = day or self.now().date()
        barbers = await self._store.list_active_barbers()
        windows = await self._store.list_all_availability()

        return {
            barber.id: self._resolver.is_barber_available_on(windows, barber.id, day)
            for barber in barbers
        }

    async def list_appointments(
        self,
        *,
        status: str = "all",
        view: str = "all",
        sort_by: str = "date",
        ascending: bool = False,
    ) -> List[Appointment]:
        """Admin listing with the dashboard's status filter, view and sort."""
        appointments = await self._store.list_appointments()
        barbers = await self._store.list_active_barbers()

        filtered = filter_appointments(
            appointments, status=status, view=view, today=self.now().date()
        )
        return sort_appointments(
            filtered,
            key=sort_by,
            ascending=ascending,
            barber_names={barber.id: barber.name for barber in barbers},
        )

    async def update_appointment_status(self, appointment_id: str, status: str) -> Appointment:
        new_status = parse_status(status)
        updated = await self._store.update_appointment_status(appointment_id, new_status)
        logger.info("Appointment %s set to %s", appointment_id, new_status.value)
        return updated
