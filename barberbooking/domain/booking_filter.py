"""
Classification of raw slots into booked, past and available.
"""

from datetime import date, datetime
from typing import Iterable, List

from .models import TimeSlot
from .slot_generator import normalize_clock, parse_clock

REASON_BOOKED = "already booked"
REASON_PAST = "past time"


def is_slot_in_past(day: date, slot_time: str, now: datetime) -> bool:
    """
    Check if a slot has already started, by local wall-clock time.

    Only slots on today's date can be in the past; a slot starting exactly
    now counts as past.
    """
    if day != now.date():
        return False

    clock = parse_clock(slot_time)
    return (clock.hour, clock.minute) <= (now.hour, now.minute)


def classify_slots(
    raw_slots: Iterable[str],
    booked_times: Iterable[str],
    day: date,
    now: datetime
) -> List[TimeSlot]:
    """
    Classify every raw slot for the day.

    Booked is checked before past, so a slot that is both is reported as
    booked only. Output order matches input order.

    Args:
        raw_slots: Slot times from the availability resolver
        booked_times: Times of confirmed appointments for the same barber and day
        day: The day being resolved
        now: Current local wall-clock instant

    Returns:
        One TimeSlot per raw slot
    """
    booked = {normalize_clock(t) for t in booked_times}
    classified: List[TimeSlot] = []

    for slot_time in raw_slots:
        if slot_time in booked:
            classified.append(
                TimeSlot(time=slot_time, available=False, booked=True, reason=REASON_BOOKED)
            )
        elif is_slot_in_past(day, slot_time, now):
            classified.append(
                TimeSlot(time=slot_time, available=False, is_past=True, reason=REASON_PAST)
            )
        else:
            classified.append(TimeSlot(time=slot_time))

    return classified
