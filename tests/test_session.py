"""
Tests for the per-customer booking session.
"""

from datetime import date

import pytest

from barberbooking.domain.exceptions import ValidationError
from barberbooking.domain.models import TimeSlot
from barberbooking.services.session import BookingSession, BookingStep

TUESDAY = date(2026, 10, 20)


def _slots():
    return [
        TimeSlot(time="09:00"),
        TimeSlot(time="09:30", available=False, booked=True, reason="already booked"),
        TimeSlot(time="10:00"),
    ]


def _session_at_time_step() -> BookingSession:
    session = BookingSession()
    session.select_service("beard_trim")
    session.select_barber("b1")
    session.select_date(TUESDAY)
    session.show_slots(_slots())
    return session


class TestBookingSession:
    """Tests for BookingSession step transitions."""

    def test_happy_path(self):
        session = _session_at_time_step()
        session.select_time("10:00")

        request = session.to_request("Sara Nielsen", "sara@example.com", "12345678")
        session.complete("a-42")

        assert request.barber_id == "b1"
        assert request.appointment_date == TUESDAY
        assert request.appointment_time == "10:00"
        assert request.service_type == "beard_trim"
        assert session.step == BookingStep.DONE
        assert session.appointment_id == "a-42"

    def test_booked_slot_not_selectable(self):
        session = _session_at_time_step()

        with pytest.raises(ValidationError, match="already booked"):
            session.select_time("09:30")
        assert session.time is None

    def test_unknown_slot_not_selectable(self):
        session = _session_at_time_step()

        with pytest.raises(ValidationError, match="not offered"):
            session.select_time("12:00")

    def test_changing_barber_resets_date_and_time(self):
        session = _session_at_time_step()
        session.select_time("09:00")

        session.select_barber("b2")

        assert session.day is None
        assert session.time is None
        assert session.slots == []
        assert session.step == BookingStep.DATE

    def test_same_barber_keeps_date(self):
        session = _session_at_time_step()

        session.select_barber("b1")

        assert session.day == TUESDAY

    def test_changing_date_clears_time(self):
        session = _session_at_time_step()
        session.select_time("09:00")

        session.select_date(date(2026, 10, 21))

        assert session.time is None
        assert session.slots == []
        assert session.step == BookingStep.TIME

    def test_date_requires_barber(self):
        with pytest.raises(ValidationError):
            BookingSession().select_date(TUESDAY)

    def test_request_requires_selections(self):
        session = BookingSession()
        session.select_barber("b1")

        with pytest.raises(ValidationError):
            session.to_request("Sara Nielsen", "sara@example.com", "12345678")

    def test_general_cut(self):
        session = BookingSession()
        session.select_service(None)

        assert session.service_type is None
        assert session.step == BookingStep.BARBER
