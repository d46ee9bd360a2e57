"""
Tests for availability windows and the availability resolver.
"""

from datetime import date

import pytest

from barberbooking.domain.availability import AvailabilityResolver
from barberbooking.domain.exceptions import ValidationError
from barberbooking.domain.models import AvailabilityWindow


def _window(barber_id="b1", from_date=date(2026, 10, 1), to_date=date(2026, 10, 31),
            start="09:00", end="12:00", is_available=True):
    return AvailabilityWindow(
        barber_id=barber_id,
        from_date=from_date,
        to_date=to_date,
        start_time=start,
        end_time=end,
        is_available=is_available,
    )


class TestAvailabilityWindow:
    """Tests for AvailabilityWindow invariants."""

    def test_valid_window(self):
        window = _window()

        assert window.covers(date(2026, 10, 1))
        assert window.covers(date(2026, 10, 31))
        assert not window.covers(date(2026, 11, 1))
        assert window.natural_key == ("b1", date(2026, 10, 1), date(2026, 10, 31))

    def test_from_after_to_raises(self):
        with pytest.raises(ValidationError, match="must not be after"):
            _window(from_date=date(2026, 11, 1), to_date=date(2026, 10, 1))

    def test_start_not_before_end_raises(self):
        with pytest.raises(ValidationError, match="must be before end_time"):
            _window(start="12:00", end="12:00")

    def test_single_day_window(self):
        window = _window(from_date=date(2026, 10, 20), to_date=date(2026, 10, 20))

        assert window.covers(date(2026, 10, 20))
        assert not window.covers(date(2026, 10, 21))


class TestAvailabilityResolver:
    """Tests for AvailabilityResolver."""

    def setup_method(self):
        self.resolver = AvailabilityResolver()

    def test_single_window(self):
        """A matching window expands into its slots."""
        slots = self.resolver.resolve_day_slots([_window()], "b1", date(2026, 10, 20))

        assert slots == ["09:00", "09:30", "10:00", "10:30", "11:00", "11:30"]

    def test_no_window_yields_empty(self):
        """No matching window means no slots."""
        assert self.resolver.resolve_day_slots([], "b1", date(2026, 10, 20)) == []

    def test_date_outside_range_yields_empty(self):
        slots = self.resolver.resolve_day_slots([_window()], "b1", date(2026, 11, 5))

        assert slots == []

    def test_other_barber_ignored(self):
        slots = self.resolver.resolve_day_slots([_window(barber_id="b2")], "b1", date(2026, 10, 20))

        assert slots == []

    def test_unavailable_window_ignored(self):
        slots = self.resolver.resolve_day_slots([_window(is_available=False)], "b1", date(2026, 10, 20))

        assert slots == []

    def test_overlapping_windows_are_merged(self):
        """Overlaps are unioned, de-duplicated and sorted."""
        windows = [
            _window(start="13:00", end="15:00"),
            _window(start="10:00", end="14:00"),
        ]

        slots = self.resolver.resolve_day_slots(windows, "b1", date(2026, 10, 20))

        assert slots == [
            "10:00", "10:30", "11:00", "11:30", "12:00", "12:30",
            "13:00", "13:30", "14:00", "14:30",
        ]

    def test_disjoint_windows_keep_gap(self):
        windows = [
            _window(start="09:00", end="10:00"),
            _window(start="15:00", end="16:00", from_date=date(2026, 10, 15)),
        ]

        slots = self.resolver.resolve_day_slots(windows, "b1", date(2026, 10, 20))

        assert slots == ["09:00", "09:30", "15:00", "15:30"]

    def test_is_barber_available_on(self):
        windows = [_window(), _window(barber_id="b2", is_available=False)]

        assert self.resolver.is_barber_available_on(windows, "b1", date(2026, 10, 20))
        assert not self.resolver.is_barber_available_on(windows, "b2", date(2026, 10, 20))
        assert not self.resolver.is_barber_available_on(windows, "b1", date(2026, 12, 1))
