"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .booking_request import BookingRequest, parse_booking_request
from .booking_service import AppointmentStoreProtocol, BookingService, NotifierProtocol
from .session import BookingSession, BookingStep

__all__ = [
    "AppointmentStoreProtocol",
    "BookingRequest",
    "BookingService",
    "BookingSession",
    "BookingStep",
    "NotifierProtocol",
    "parse_booking_request",
]
