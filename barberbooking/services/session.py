"""
Explicit state for one customer's pass through the multi-step booking flow.

Each customer gets their own BookingSession; nothing is kept at module level.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import IntEnum
from typing import List, Optional

from ..domain.exceptions import ValidationError
from ..domain.models import TimeSlot
from .booking_request import BookingRequest, parse_booking_request


class BookingStep(IntEnum):
    """Steps of the booking flow, in order."""
    SERVICE = 1
    BARBER = 2
    DATE = 3
    TIME = 4
    DETAILS = 5
    DONE = 6


@dataclass
class BookingSession:
    """
    Selections made so far in the booking flow.

    Changing an earlier choice clears the later ones: a new barber or date
    invalidates the displayed slots and the chosen time.
    """
    service_type: Optional[str] = None
    barber_id: Optional[str] = None
    day: Optional[date] = None
    time: Optional[str] = None
    step: BookingStep = BookingStep.SERVICE
    slots: List[TimeSlot] = field(default_factory=list)
    appointment_id: Optional[str] = None

    def select_service(self, service_type: Optional[str]) -> None:
        """Pick a catalog service; None books a general cut."""
        self.service_type = service_type
        self.step = max(self.step, BookingStep.BARBER)

    def select_barber(self, barber_id: str) -> None:
        if not barber_id:
            raise ValidationError("Please select a barber")
        if barber_id != self.barber_id:
            self.day = None
            self._clear_time()
        self.barber_id = barber_id
        self.step = BookingStep.DATE

    def select_date(self, day: date) -> None:
        if self.barber_id is None:
            raise ValidationError("Please select a barber")
        if day != self.day:
            self._clear_time()
        self.day = day
        self.step = BookingStep.TIME

    def show_slots(self, slots: List[TimeSlot]) -> None:
        """Record the snapshot of classified slots shown to the customer."""
        self.slots = list(slots)

    def select_time(self, time: str) -> None:
        """
        Pick one of the displayed slots.

        Raises:
            ValidationError: If the time was not offered or is not available
        """
        if self.day is None:
            raise ValidationError("Please select a date")

        slot = next((s for s in self.slots if s.time == time), None)
        if slot is None:
            raise ValidationError(f"{time} is not offered on {self.day.isoformat()}")
        if not slot.available:
            raise ValidationError(f"{time} is not available ({slot.reason})")

        self.time = time
        self.step = BookingStep.DETAILS

    def to_request(self, customer_name: str, customer_email: str, customer_phone: str) -> BookingRequest:
        """Combine the selections with the customer's contact details."""
        if self.barber_id is None or self.day is None or self.time is None:
            raise ValidationError("Please select a barber, a date and a time")

        return parse_booking_request(
            {
                "customer_name": customer_name,
                "customer_email": customer_email,
                "customer_phone": customer_phone,
                "barber_id": self.barber_id,
                "appointment_date": self.day,
                "appointment_time": self.time,
                "service_type": self.service_type,
            }
        )

    def complete(self, appointment_id: Optional[str]) -> None:
        self.appointment_id = appointment_id
        self.step = BookingStep.DONE

    def _clear_time(self) -> None:
        self.time = None
        self.slots = []
