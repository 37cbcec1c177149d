from collections import namedtuple
from datetime import date, datetime, time

import pytest

from scheduling import Slot, anchor, day_of_week, resolve_slots
from utils.errors import ValidationError

Service = namedtuple("Service", "duration_minutes")
Window = namedtuple("Window", "start_time end_time")
Booked = namedtuple("Booked", "start_time end_time status")

DAY = date(2031, 1, 6)


def at(hour, minute=0):
    return datetime(2031, 1, 6, hour, minute)


def hours(slots):
    return [(s.start_time.strftime("%H:%M"), s.end_time.strftime("%H:%M")) for s in slots]


def test_full_window_without_bookings():
    slots = resolve_slots(Service(60), [Window(time(9), time(17))], [], DAY)
    assert len(slots) == 8
    assert slots[0] == Slot(at(9), at(10))
    assert slots[-1] == Slot(at(16), at(17))


def test_booking_boundaries_do_not_block_neighbours():
    booking = Booked(at(10), at(11), "CONFIRMED")
    result = hours(resolve_slots(Service(60), [Window(time(9), time(17))], [booking], DAY))

    assert ("09:00", "10:00") in result
    assert ("11:00", "12:00") in result
    assert ("10:00", "11:00") not in result
    assert len(result) == 7


def test_no_windows_means_no_slots():
    assert resolve_slots(Service(30), [], [], DAY) == []


def test_booking_covering_whole_window():
    booking = Booked(at(9), at(17), "PENDING")
    assert resolve_slots(Service(60), [Window(time(9), time(17))], [booking], DAY) == []


def test_last_slot_past_window_close_is_dropped():
    assert hours(resolve_slots(Service(60), [Window(time(9), time(10, 20))], [], DAY)) == [("09:00", "10:00")]
    assert hours(resolve_slots(Service(30), [Window(time(9), time(9, 50))], [], DAY)) == [("09:00", "09:30")]


def test_duration_longer_than_window():
    assert resolve_slots(Service(90), [Window(time(9), time(10))], [], DAY) == []


def test_windows_are_scanned_independently():
    windows = [Window(time(9), time(10)), Window(time(14), time(15))]
    result = hours(resolve_slots(Service(30), windows, [], DAY))
    assert result == [("09:00", "09:30"), ("09:30", "10:00"), ("14:00", "14:30"), ("14:30", "15:00")]


def test_output_follows_window_order_not_clock_order():
    windows = [Window(time(14), time(15)), Window(time(9), time(10))]
    result = hours(resolve_slots(Service(60), windows, [], DAY))
    assert result == [("14:00", "15:00"), ("09:00", "10:00")]


def test_overlapping_windows_are_not_merged():
    windows = [Window(time(9), time(11)), Window(time(10), time(12))]
    result = hours(resolve_slots(Service(60), windows, [], DAY))
    assert result == [("09:00", "10:00"), ("10:00", "11:00"), ("10:00", "11:00"), ("11:00", "12:00")]


def test_cancelled_bookings_free_their_range():
    booking = Booked(at(10), at(11), "CANCELLED")
    result = hours(resolve_slots(Service(60), [Window(time(9), time(12))], [booking], DAY))
    assert ("10:00", "11:00") in result


def test_partial_overlap_blocks_both_touched_slots():
    # 10:30-11:30 touches 10:00-11:00 and 11:00-12:00
    booking = Booked(at(10, 30), at(11, 30), "CONFIRMED")
    result = hours(resolve_slots(Service(60), [Window(time(9), time(13))], [booking], DAY))
    assert result == [("09:00", "10:00"), ("12:00", "13:00")]


def test_booking_inside_slot_blocks_it():
    booking = Booked(at(9, 15), at(9, 30), "CONFIRMED")
    result = hours(resolve_slots(Service(60), [Window(time(9), time(11))], [booking], DAY))
    assert result == [("10:00", "11:00")]


def test_fixed_stepping_does_not_rescan_after_a_booking():
    # slots stay on the 09:00 + n*60 grid even though 10:15 is free
    booking = Booked(at(9, 0), at(9, 15), "CONFIRMED")
    result = hours(resolve_slots(Service(60), [Window(time(9), time(12))], [booking], DAY))
    assert result == [("10:00", "11:00"), ("11:00", "12:00")]


def test_resolution_is_repeatable():
    windows = [Window(time(9), time(12))]
    bookings = [Booked(at(10), at(11), "PENDING")]
    first = resolve_slots(Service(45), windows, bookings, DAY)
    second = resolve_slots(Service(45), windows, bookings, DAY)
    assert first == second


def test_emitted_slots_have_exact_duration_and_stay_inside_window():
    window = Window(time(8, 10), time(18, 5))
    bookings = [Booked(at(9), at(9, 40), "PENDING"), Booked(at(13, 5), at(15), "CONFIRMED")]
    slots = resolve_slots(Service(25), [window], bookings, DAY)

    assert slots
    for slot in slots:
        assert (slot.end_time - slot.start_time).total_seconds() == 25 * 60
        assert slot.start_time >= anchor(DAY, window.start_time)
        assert slot.end_time <= anchor(DAY, window.end_time)
        for b in bookings:
            assert not (slot.start_time < b.end_time and slot.end_time > b.start_time)


def test_windows_are_anchored_on_the_target_date():
    slots = resolve_slots(Service(60), [Window(time(9), time(10))], [], date(2031, 3, 2))
    assert slots == [Slot(datetime(2031, 3, 2, 9), datetime(2031, 3, 2, 10))]


def test_to_dict_uses_iso_strings():
    assert Slot(at(9), at(10)).to_dict() == {
        "start_time": "2031-01-06T09:00:00",
        "end_time": "2031-01-06T10:00:00",
    }


@pytest.mark.parametrize("duration", [0, -30, None, 1.5, True])
def test_invalid_duration_is_rejected(duration):
    with pytest.raises(ValidationError):
        resolve_slots(Service(duration), [Window(time(9), time(10))], [], DAY)


def test_inverted_window_is_rejected():
    with pytest.raises(ValidationError):
        resolve_slots(Service(30), [Window(time(12), time(9))], [], DAY)


@pytest.mark.parametrize("day, expected", [
    (date(2031, 1, 5), 0),   # Sunday
    (date(2031, 1, 6), 1),   # Monday
    (date(2031, 1, 11), 6),  # Saturday
])
def test_day_of_week_counts_from_sunday(day, expected):
    assert day_of_week(day) == expected
