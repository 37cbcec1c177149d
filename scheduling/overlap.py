"""
Overlap detection between half-open time ranges.

A range ``[start, end)`` does not contain its end instant, so a booking
ending at 10:00 and a slot starting at 10:00 touch without overlapping.
"""

from datetime import datetime
from typing import Iterable, List, Any

CANCELLED = "CANCELLED"


def overlaps(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    return a_start < b_end and a_end > b_start


def is_blocking(booking: Any) -> bool:
    # bookings without a status (plain ranges) always block
    return getattr(booking, "status", None) != CANCELLED


def find_conflicts(start: datetime, end: datetime, bookings: Iterable[Any]) -> List[Any]:
    """
    Returns the bookings whose ``[start_time, end_time)`` overlaps ``[start, end)``.

    Cancelled bookings are skipped: their time range is free again.
    """
    return [
        b for b in bookings
        if is_blocking(b) and overlaps(start, end, b.start_time, b.end_time)
    ]
