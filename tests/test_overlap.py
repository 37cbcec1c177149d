from collections import namedtuple
from datetime import datetime

import pytest

from scheduling import find_conflicts, overlaps

Booked = namedtuple("Booked", "start_time end_time status")
Range = namedtuple("Range", "start_time end_time")


def at(hour, minute=0):
    return datetime(2031, 1, 6, hour, minute)


@pytest.mark.parametrize("b_start, b_end, expected", [
    (at(10), at(11), True),          # identical
    (at(9, 30), at(10, 30), True),   # starts before, ends inside
    (at(10, 30), at(11, 30), True),  # starts inside, ends after
    (at(10, 15), at(10, 45), True),  # contained
    (at(9), at(12), True),           # contains
    (at(9), at(10), False),          # ends exactly at start
    (at(11), at(12), False),         # starts exactly at end
    (at(7), at(8), False),           # disjoint
])
def test_half_open_overlap(b_start, b_end, expected):
    assert overlaps(at(10), at(11), b_start, b_end) is expected
    assert overlaps(b_start, b_end, at(10), at(11)) is expected


def test_find_conflicts_skips_cancelled_and_abutting():
    bookings = [
        Booked(at(9), at(10), "CONFIRMED"),
        Booked(at(10), at(11), "CANCELLED"),
        Booked(at(10, 30), at(11, 30), "PENDING"),
    ]
    assert find_conflicts(at(10), at(11), bookings) == [bookings[2]]


def test_ranges_without_status_always_block():
    assert find_conflicts(at(10), at(11), [Range(at(10), at(11))]) == [Range(at(10), at(11))]
