"""
Slot Resolution

Turns a provider's weekly availability windows into bookable slots for
one calendar date:
- each window is anchored onto the date and cut into duration-sized slots
- slots overlapping a non-cancelled booking are skipped
- a slot that would run past the window's close is dropped, never shortened
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Any, Iterable, List

from .overlap import find_conflicts
from .validation import validate_duration, validate_window


@dataclass(frozen=True)
class Slot:
    start_time: datetime
    end_time: datetime

    def to_dict(self) -> dict:
        return {
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat(),
        }


def day_of_week(target_date: date) -> int:
    """0=Sunday .. 6=Saturday, the numbering availability windows are stored with."""
    return target_date.isoweekday() % 7


def anchor(target_date: date, time_of_day: time) -> datetime:
    return datetime.combine(target_date, time(time_of_day.hour, time_of_day.minute))


def resolve_slots(
    service: Any,
    windows: Iterable[Any],
    bookings: Iterable[Any],
    target_date: date,
) -> List[Slot]:
    """
    Generate the free slots of ``service`` on ``target_date``.

    Args:
        service: anything with ``duration_minutes``
        windows: availability windows already filtered to the provider and
            to the weekday of ``target_date``; each has ``start_time`` and
            ``end_time`` as time-of-day
        bookings: the provider's bookings touching ``target_date``
        target_date: calendar date the windows are anchored on

    Returns:
        Slots in window order, chronological within each window. Windows are
        not merged, so overlapping windows can yield the same slot twice.
    """
    duration_minutes = validate_duration(getattr(service, "duration_minutes", None))
    step = timedelta(minutes=duration_minutes)
    bookings = list(bookings)

    slots: List[Slot] = []
    for window in windows:
        validate_window(window.start_time, window.end_time)
        window_start = anchor(target_date, window.start_time)
        window_end = anchor(target_date, window.end_time)

        current_start = window_start
        while current_start < window_end:
            current_end = current_start + step
            if current_end <= window_end and not find_conflicts(current_start, current_end, bookings):
                slots.append(Slot(current_start, current_end))
            current_start += step

    return slots
