"""
Expansion of a time-of-day range into discrete bookable ticks.

Pure functions only: results never depend on the current date or time.
"""

from datetime import time
from typing import Iterator

import pendulum

SLOT_INTERVAL_MINUTES = 30


def parse_clock(value: str) -> time:
    """
    Parse a wall-clock string into a time object.

    Accepts ``HH:MM`` as well as the ``HH:MM:SS`` form Postgres returns for
    ``time`` columns.

    Raises:
        ValueError: If the string is not a valid time of day
    """
    text = value.strip()
    fmt = "HH:mm:ss" if text.count(":") == 2 else "HH:mm"
    try:
        return pendulum.from_format(text, fmt).time()
    except ValueError as exc:
        raise ValueError(f"Invalid time of day: '{value}' (expected HH:MM)") from exc


def format_clock(value: time) -> str:
    """Format a time object as ``HH:MM``."""
    return f"{value.hour:02d}:{value.minute:02d}"


def normalize_clock(value: str) -> str:
    """Normalize any accepted time string to ``HH:MM``."""
    return format_clock(parse_clock(value))


def generate_slots(start_time: str, end_time: str) -> Iterator[str]:
    """
    Yield ``HH:MM`` ticks every 30 minutes from start_time (inclusive)
    up to, but not including, end_time.

    A degenerate range (start_time >= end_time) yields nothing.

    Example:
        09:00 - 11:00 -> 09:00, 09:30, 10:00, 10:30
    """
    start = parse_clock(start_time)
    end = parse_clock(end_time)

    # Anchor both ends on the same day so arithmetic never wraps midnight
    current = pendulum.naive(1970, 1, 1, start.hour, start.minute)
    stop = pendulum.naive(1970, 1, 1, end.hour, end.minute)

    while current < stop:
        yield current.format("HH:mm")
        current = current.add(minutes=SLOT_INTERVAL_MINUTES)
