"""
Filtering and sorting of appointments for the admin dashboard.
"""

from __future__ import annotations

from datetime import date
from typing import Callable, Dict, List, Literal, Mapping, Sequence

from ..domain.exceptions import ValidationError
from ..domain.models import Appointment, AppointmentStatus
from ..domain.slot_generator import parse_clock

View = Literal["today", "upcoming", "all"]
SortKey = Literal["date", "time", "customer", "barber", "status"]

VIEWS = ("today", "upcoming", "all")
SORT_KEYS = ("date", "time", "customer", "barber", "status")
UNKNOWN_BARBER = "Unknown"


def parse_status(value: str) -> AppointmentStatus:
    """
    Convert user input to an AppointmentStatus.

    Raises:
        ValidationError: For anything but the four known statuses
    """
    try:
        return AppointmentStatus(value.strip().lower())
    except ValueError as exc:
        allowed = ", ".join(s.value for s in AppointmentStatus)
        raise ValidationError(f"Unknown status '{value}'. Use one of: {allowed}") from exc


def filter_appointments(
    appointments: Sequence[Appointment],
    *,
    status: str = "all",
    view: View = "all",
    today: date,
) -> List[Appointment]:
    """
    Apply the status filter, then the view.

    Views: ``today`` keeps appointments dated today, ``upcoming`` keeps
    those dated after today, ``all`` keeps everything.
    """
    if view not in VIEWS:
        raise ValidationError(f"Unknown view '{view}'. Use one of: {', '.join(VIEWS)}")

    filtered = list(appointments)

    if status != "all":
        wanted = parse_status(status)
        filtered = [a for a in filtered if a.status == wanted]

    if view == "today":
        filtered = [a for a in filtered if a.appointment_date == today]
    elif view == "upcoming":
        filtered = [a for a in filtered if a.appointment_date > today]

    return filtered


def sort_appointments(
    appointments: Sequence[Appointment],
    *,
    key: SortKey = "date",
    ascending: bool = False,
    barber_names: Mapping[str, str] | None = None,
) -> List[Appointment]:
    """
    Sort appointments by one column.

    Barber sorting uses display names; unknown barbers sort as "Unknown".
    The sort is stable, so equal keys keep their incoming order.
    """
    names = barber_names or {}
    sort_keys: Dict[str, Callable[[Appointment], object]] = {
        "date": lambda a: a.appointment_date,
        "time": lambda a: parse_clock(a.appointment_time),
        "customer": lambda a: a.customer_name.lower(),
        "barber": lambda a: names.get(a.barber_id, UNKNOWN_BARBER).lower(),
        "status": lambda a: a.status.value,
    }

    if key not in sort_keys:
        raise ValidationError(f"Unknown sort key '{key}'. Use one of: {', '.join(SORT_KEYS)}")

    return sorted(appointments, key=sort_keys[key], reverse=not ascending)
