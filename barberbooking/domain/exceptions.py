"""
Domain-specific exception hierarchy for the booking core.
"""

from typing import List, Sequence


class BookingError(Exception):
    """Base class for all application-level errors."""


class ValidationError(BookingError):
    """Raised when a booking request or admin input is malformed."""

    def __init__(self, messages: Sequence[str] | str):
        if isinstance(messages, str):
            messages = [messages]
        self.messages: List[str] = list(messages)
        super().__init__("; ".join(self.messages))


class SlotConflict(BookingError):
    """Raised when the chosen slot is already confirmed-booked."""

    def __init__(self, barber_id: str = "", day: str = "", time: str = ""):
        self.barber_id = barber_id
        self.day = day
        self.time = time
        super().__init__(
            "This time slot has already been booked. Please choose another time."
        )


class StoreUnavailable(BookingError):
    """Raised when the appointment or availability store cannot be reached."""


class NotificationFailure(BookingError):
    """Raised by notifiers when a booking notification could not be sent."""


class ConfigError(BookingError):
    """Raised when the configuration file is missing or invalid."""
