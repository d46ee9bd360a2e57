"""
Domain models for availability windows, appointments and derived slots.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional, Tuple

from .exceptions import ValidationError
from .slot_generator import parse_clock


class AppointmentStatus(str, Enum):
    """Lifecycle states of an appointment."""
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    PENDING = "pending"


@dataclass(frozen=True)
class AvailabilityWindow:
    """
    An admin-defined date range plus the daily hours a barber accepts bookings.

    Invariant: from_date <= to_date and start_time < end_time.
    """
    barber_id: str
    from_date: date
    to_date: date
    start_time: str
    end_time: str
    is_available: bool = True
    id: Optional[str] = None

    def __post_init__(self):
        if self.from_date > self.to_date:
            raise ValidationError(
                f"from_date {self.from_date} must not be after to_date {self.to_date}"
            )
        if parse_clock(self.start_time) >= parse_clock(self.end_time):
            raise ValidationError(
                f"start_time {self.start_time} must be before end_time {self.end_time}"
            )

    @property
    def natural_key(self) -> Tuple[str, date, date]:
        """Key used to decide between update and insert."""
        return (self.barber_id, self.from_date, self.to_date)

    def covers(self, day: date) -> bool:
        """Check if the window's date range includes the given day."""
        return self.from_date <= day <= self.to_date

    def __str__(self) -> str:
        flag = "available" if self.is_available else "unavailable"
        return (
            f"{self.from_date.isoformat()} -> {self.to_date.isoformat()} "
            f"{self.start_time}-{self.end_time} ({flag})"
        )


@dataclass
class Appointment:
    """
    A customer's booking for one barber at one 30-minute slot.
    """
    customer_name: str
    customer_email: str
    customer_phone: str
    barber_id: str
    appointment_date: date
    appointment_time: str
    service_type: Optional[str] = None
    status: AppointmentStatus = AppointmentStatus.CONFIRMED
    id: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def slot_key(self) -> Tuple[str, date, str]:
        """(barber, date, time) tuple that must be unique among confirmed rows."""
        return (self.barber_id, self.appointment_date, self.appointment_time)

    @property
    def is_confirmed(self) -> bool:
        return self.status == AppointmentStatus.CONFIRMED


@dataclass(frozen=True)
class Barber:
    """A barber that customers can book."""
    id: str
    name: str
    is_active: bool = True
    photo_path: Optional[str] = None


@dataclass
class TimeSlot:
    """
    A classified bookable tick for one barber and day.

    Derived on every resolution, never stored.
    """
    time: str
    available: bool = True
    booked: bool = False
    is_past: bool = False
    reason: Optional[str] = field(default=None)

    @property
    def status(self) -> str:
        """Single-word classification used for display."""
        if self.booked:
            return "booked"
        if self.is_past:
            return "past"
        return "available"
