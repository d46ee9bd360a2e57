"""
Tests for slot classification.
"""

from datetime import date, datetime

from barberbooking.domain.booking_filter import (
    REASON_BOOKED,
    REASON_PAST,
    classify_slots,
    is_slot_in_past,
)
from barberbooking.domain.slot_generator import generate_slots

TODAY = date(2026, 10, 19)
NOW = datetime(2026, 10, 19, 14, 32)
TUESDAY = date(2026, 10, 20)


class TestClassifySlots:
    """Tests for classify_slots."""

    def test_all_available_on_future_date(self):
        """No bookings on a future day leaves every slot available."""
        raw = list(generate_slots("09:00", "12:00"))

        slots = classify_slots(raw, [], TUESDAY, NOW)

        assert [s.time for s in slots] == raw
        assert all(s.available and not s.booked and not s.is_past for s in slots)
        assert all(s.reason is None for s in slots)

    def test_booked_slot(self):
        """A booked time is unavailable with a reason; others are untouched."""
        raw = list(generate_slots("09:00", "12:00"))

        slots = {s.time: s for s in classify_slots(raw, ["10:00"], TUESDAY, NOW)}

        assert slots["10:00"].available is False
        assert slots["10:00"].booked is True
        assert slots["10:00"].reason == REASON_BOOKED
        assert all(s.available for t, s in slots.items() if t != "10:00")

    def test_booked_times_from_store_format(self):
        """HH:MM:SS booked times still match HH:MM slots."""
        slots = classify_slots(["10:00", "10:30"], ["10:30:00"], TUESDAY, NOW)

        assert [s.booked for s in slots] == [False, True]

    def test_past_slots_today(self):
        """At 14:32 today, 09:00..14:30 have started and 15:00 onward is available."""
        raw = list(generate_slots("09:00", "18:00"))

        slots = classify_slots(raw, [], TODAY, NOW)

        past = [s.time for s in slots if s.is_past]
        available = [s.time for s in slots if s.available]
        assert past == [t for t in raw if t <= "14:30"]
        assert available[0] == "15:00"
        assert available == [t for t in raw if t >= "15:00"]
        assert all(s.reason == REASON_PAST for s in slots if s.is_past)

    def test_slot_starting_now_is_past(self):
        now = datetime(2026, 10, 19, 14, 30)

        slots = classify_slots(["14:00", "14:30", "15:00"], [], TODAY, now)

        assert [s.is_past for s in slots] == [True, True, False]

    def test_future_date_never_past(self):
        """Late in the evening, tomorrow's early slots are still available."""
        late = datetime(2026, 10, 19, 23, 59)

        slots = classify_slots(["09:00", "09:30"], [], TUESDAY, late)

        assert not any(s.is_past for s in slots)

    def test_booked_takes_precedence_over_past(self):
        """A slot both booked and past reports as booked only."""
        slots = classify_slots(["10:00"], ["10:00"], TODAY, NOW)

        assert slots[0].booked is True
        assert slots[0].is_past is False
        assert slots[0].available is False
        assert slots[0].reason == REASON_BOOKED
        assert slots[0].status == "booked"

    def test_order_follows_input(self):
        raw = ["11:00", "09:00", "10:00"]

        assert [s.time for s in classify_slots(raw, ["09:00"], TUESDAY, NOW)] == raw

    def test_empty_input(self):
        assert classify_slots([], ["10:00"], TODAY, NOW) == []


def test_is_slot_in_past():
    assert is_slot_in_past(TODAY, "14:32", NOW)
    assert not is_slot_in_past(TODAY, "14:33", NOW)
    assert not is_slot_in_past(TUESDAY, "00:00", NOW)
    assert not is_slot_in_past(date(2026, 10, 18), "09:00", NOW)
