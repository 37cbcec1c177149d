"""
Scheduling core: turns weekly availability windows and existing bookings
into bookable slots for a calendar date. Everything here is pure and
works on plain values, so it can run without an app or database.
"""

from .overlap import overlaps, find_conflicts
from .slots import Slot, resolve_slots, anchor, day_of_week
from .validation import parse_date, parse_time_of_day, parse_start, validate_duration, validate_window

__all__ = [
    "Slot",
    "anchor",
    "day_of_week",
    "find_conflicts",
    "overlaps",
    "parse_date",
    "parse_start",
    "parse_time_of_day",
    "resolve_slots",
    "validate_duration",
    "validate_window",
]
