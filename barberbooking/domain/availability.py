"""
Resolution of a barber's bookable slots for a single day.

Combines the date-ranged availability windows with the slot generator.
Overlapping windows are merged by union rather than rejected.
"""

from datetime import date
from typing import Iterable, List, Set

from .models import AvailabilityWindow
from .slot_generator import generate_slots, parse_clock


class AvailabilityResolver:
    """
    Turns availability windows into the raw slot set for one barber and day.

    Algorithm:
    1. Keep windows for the barber that are marked available
    2. Keep windows whose date range covers the day
    3. Expand each window into 30-minute ticks
    4. Union the ticks and sort chronologically
    """

    def matching_windows(
        self,
        windows: Iterable[AvailabilityWindow],
        barber_id: str,
        day: date
    ) -> List[AvailabilityWindow]:
        """Return the available windows for this barber that cover the day."""
        return [
            window for window in windows
            if window.barber_id == barber_id
            and window.is_available
            and window.covers(day)
        ]

    def resolve_day_slots(
        self,
        windows: Iterable[AvailabilityWindow],
        barber_id: str,
        day: date
    ) -> List[str]:
        """
        Compute the ordered, de-duplicated slot times for the day.

        Args:
            windows: Availability windows (may include other barbers)
            barber_id: Barber to resolve for
            day: Target calendar date

        Returns:
            List of ``HH:MM`` strings, empty when no window matches
        """
        slots: Set[str] = set()

        for window in self.matching_windows(windows, barber_id, day):
            slots.update(generate_slots(window.start_time, window.end_time))

        return sorted(slots, key=parse_clock)

    def is_barber_available_on(
        self,
        windows: Iterable[AvailabilityWindow],
        barber_id: str,
        day: date
    ) -> bool:
        """Check if at least one available window covers the day."""
        return bool(self.matching_windows(windows, barber_id, day))
