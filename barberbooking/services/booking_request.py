"""
Validation of booking form input before any store interaction.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ValidationError as PydanticValidationError, field_validator

from ..domain.exceptions import ValidationError
from ..domain.slot_generator import normalize_clock

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
PHONE_ALLOWED = re.compile(r"^\+?[\d\s\-().]+$")
MIN_PHONE_DIGITS = 8
MAX_PHONE_DIGITS = 15


class BookingRequest(BaseModel):
    """A customer's booking form submission."""
    customer_name: str
    customer_email: str
    customer_phone: str
    barber_id: str
    appointment_date: date
    appointment_time: str
    service_type: Optional[str] = None

    @field_validator("customer_name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 2:
            raise ValueError("Name must be at least 2 characters")
        return value

    @field_validator("customer_email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        value = value.strip().lower()
        if not EMAIL_PATTERN.match(value):
            raise ValueError("Please enter a valid email address")
        return value

    @field_validator("customer_phone")
    @classmethod
    def validate_phone(cls, value: str) -> str:
        value = value.strip()
        digits = re.sub(r"\D", "", value)
        if not PHONE_ALLOWED.match(value) or not MIN_PHONE_DIGITS <= len(digits) <= MAX_PHONE_DIGITS:
            raise ValueError("Please enter a valid phone number")
        return value

    @field_validator("barber_id")
    @classmethod
    def validate_barber(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Please select a barber")
        return value

    @field_validator("appointment_time")
    @classmethod
    def validate_time(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("Please select a time")
        return normalize_clock(value)

    @field_validator("service_type")
    @classmethod
    def blank_service_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        return value.strip()


def normalize_phone(phone: str, default_country_code: str) -> str:
    """
    Normalize a phone number to ``+<country><number>`` without separators.

    ``00`` international prefixes become ``+``; numbers without any prefix
    get the default country code.

    Example:
        "12 34 56 78", "+45" -> "+4512345678"
    """
    stripped = phone.strip()
    digits = re.sub(r"\D", "", stripped)

    if stripped.startswith("+"):
        return f"+{digits}"
    if digits.startswith("00"):
        return f"+{digits[2:]}"
    return f"{default_country_code}{digits}"


def parse_booking_request(data: Dict[str, Any]) -> BookingRequest:
    """
    Build a BookingRequest from raw form data.

    Raises:
        ValidationError: With one message per invalid field
    """
    try:
        return BookingRequest(**data)
    except PydanticValidationError as exc:
        raise ValidationError(_error_messages(exc)) from exc


def _error_messages(exc: PydanticValidationError) -> List[str]:
    messages: List[str] = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ()))
        message = error.get("msg", "invalid value")
        # pydantic prefixes messages raised from validators
        message = message.removeprefix("Value error, ")
        messages.append(f"{field}: {message}" if field else message)
    return messages
