"""
Domain layer - Pure business logic without external dependencies.
"""

from .availability import AvailabilityResolver
from .booking_filter import classify_slots
from .models import Appointment, AppointmentStatus, AvailabilityWindow, Barber, TimeSlot
from .slot_generator import generate_slots

__all__ = [
    "Appointment",
    "AppointmentStatus",
    "AvailabilityResolver",
    "AvailabilityWindow",
    "Barber",
    "TimeSlot",
    "classify_slots",
    "generate_slots",
]
