"""
Tests for admin appointment filtering and sorting.
"""

from datetime import date

import pytest

from barberbooking.domain.exceptions import ValidationError
from barberbooking.domain.models import Appointment, AppointmentStatus
from barberbooking.services.appointment_queries import (
    filter_appointments,
    parse_status,
    sort_appointments,
)

TODAY = date(2026, 10, 19)


def _appointment(id, day=TODAY, time="10:00", barber_id="b1", name="Lars",
                 status=AppointmentStatus.CONFIRMED):
    return Appointment(
        id=id,
        customer_name=name,
        customer_email=f"{id}@example.com",
        customer_phone="+4512345678",
        barber_id=barber_id,
        appointment_date=day,
        appointment_time=time,
        status=status,
    )


@pytest.fixture
def appointments():
    return [
        _appointment("a1", day=date(2026, 10, 18), name="emil", status=AppointmentStatus.COMPLETED),
        _appointment("a2", time="13:00", barber_id="b2", name="Sara"),
        _appointment("a3", time="09:30", name="anna", status=AppointmentStatus.CANCELLED),
        _appointment("a4", day=date(2026, 10, 21), barber_id="b9", name="Yusuf"),
    ]


class TestFilterAppointments:
    """Tests for filter_appointments."""

    def test_today_view(self, appointments):
        result = filter_appointments(appointments, view="today", today=TODAY)

        assert [a.id for a in result] == ["a2", "a3"]

    def test_upcoming_view(self, appointments):
        result = filter_appointments(appointments, view="upcoming", today=TODAY)

        assert [a.id for a in result] == ["a4"]

    def test_status_then_view(self, appointments):
        result = filter_appointments(appointments, status="confirmed", view="all", today=TODAY)

        assert [a.id for a in result] == ["a2", "a4"]

    def test_unknown_view(self, appointments):
        with pytest.raises(ValidationError, match="Unknown view"):
            filter_appointments(appointments, view="week", today=TODAY)


class TestSortAppointments:
    """Tests for sort_appointments."""

    def test_default_is_newest_first(self, appointments):
        result = sort_appointments(appointments)

        assert [a.id for a in result] == ["a4", "a2", "a3", "a1"]

    def test_time_ascending(self, appointments):
        result = sort_appointments(appointments, key="time", ascending=True)

        assert [a.id for a in result] == ["a3", "a1", "a4", "a2"]

    def test_customer_is_case_insensitive(self, appointments):
        result = sort_appointments(appointments, key="customer", ascending=True)

        assert [a.customer_name for a in result] == ["anna", "emil", "Sara", "Yusuf"]

    def test_barber_uses_names_and_unknown(self, appointments):
        names = {"b1": "Ahmad", "b2": "Mikkel"}

        result = sort_appointments(appointments, key="barber", ascending=True, barber_names=names)

        assert [a.id for a in result] == ["a1", "a3", "a2", "a4"]

    def test_invalid_key(self, appointments):
        with pytest.raises(ValidationError, match="Unknown sort key"):
            sort_appointments(appointments, key="price")


class TestParseStatus:
    """Tests for parse_status."""

    def test_case_and_whitespace(self):
        assert parse_status(" Cancelled ") == AppointmentStatus.CANCELLED

    def test_unknown(self):
        with pytest.raises(ValidationError, match="Use one of"):
            parse_status("no-show")
