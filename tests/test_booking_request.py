"""
Tests for booking form validation.
"""

from datetime import date

import pytest

from barberbooking.domain.exceptions import ValidationError
from barberbooking.services.booking_request import normalize_phone, parse_booking_request


def _form(**overrides):
    data = {
        "customer_name": "  Sara Nielsen ",
        "customer_email": "Sara@Example.COM ",
        "customer_phone": "12 34 56 78",
        "barber_id": "b1",
        "appointment_date": "2026-10-20",
        "appointment_time": "10:00:00",
        "service_type": "beard_trim",
    }
    data.update(overrides)
    return data


class TestParseBookingRequest:
    """Tests for parse_booking_request."""

    def test_valid_form_is_normalized(self):
        request = parse_booking_request(_form())

        assert request.customer_name == "Sara Nielsen"
        assert request.customer_email == "sara@example.com"
        assert request.appointment_date == date(2026, 10, 20)
        assert request.appointment_time == "10:00"
        assert request.service_type == "beard_trim"

    def test_blank_service_means_general_cut(self):
        assert parse_booking_request(_form(service_type="  ")).service_type is None
        assert parse_booking_request(_form(service_type=None)).service_type is None

    def test_one_message_per_invalid_field(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_booking_request(_form(customer_name="S", customer_email="not-an-email"))

        assert exc_info.value.messages == [
            "customer_name: Name must be at least 2 characters",
            "customer_email: Please enter a valid email address",
        ]

    @pytest.mark.parametrize(
        "phone",
        ["1234567", "12a45678", "+1234567890123456", ""],
    )
    def test_invalid_phone(self, phone):
        with pytest.raises(ValidationError, match="customer_phone"):
            parse_booking_request(_form(customer_phone=phone))

    @pytest.mark.parametrize("phone", ["12345678", "+45 12 34 56 78", "(045) 1234-5678", "0045.1234.5678"])
    def test_valid_phone_formats(self, phone):
        assert parse_booking_request(_form(customer_phone=phone)).customer_phone == phone

    def test_missing_barber(self):
        with pytest.raises(ValidationError, match="Please select a barber"):
            parse_booking_request(_form(barber_id=" "))

    def test_missing_fields_reported(self):
        data = _form()
        del data["appointment_date"]

        with pytest.raises(ValidationError, match="appointment_date"):
            parse_booking_request(data)

    def test_malformed_time(self):
        with pytest.raises(ValidationError, match="appointment_time"):
            parse_booking_request(_form(appointment_time="half past ten"))


class TestNormalizePhone:
    """Tests for normalize_phone."""

    def test_local_number_gets_country_code(self):
        assert normalize_phone("12 34 56 78", "+45") == "+4512345678"

    def test_plus_prefix_kept(self):
        assert normalize_phone("+46 70-123 45 67", "+45") == "+46701234567"

    def test_double_zero_prefix(self):
        assert normalize_phone("0049 30 1234567", "+45") == "+49301234567"
