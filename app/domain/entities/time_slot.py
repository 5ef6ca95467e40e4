from __future__ import annotations

from datetime import date

TIME_SLOTS: tuple[str, ...] = (
    "09:00",
    "09:30",
    "10:00",
    "10:30",
    "11:00",
    "11:30",
    "14:00",
    "14:30",
    "15:00",
    "15:30",
    "16:00",
    "16:30",
    "17:00",
)

SUNDAY = 6


def is_valid_time_slot(value: str) -> bool:
    return value in TIME_SLOTS


def is_bookable_date(candidate: date, today: date) -> bool:
    """Past days, today and Sundays cannot be booked."""
    return candidate > today and candidate.weekday() != SUNDAY
