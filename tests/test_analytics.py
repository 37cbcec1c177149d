from datetime import date, datetime
from decimal import Decimal
from types import SimpleNamespace

from services.analytics import analytics_range, build_provider_analytics

TODAY = date(2031, 1, 10)


def booking(day, status="CONFIRMED", price="40.00", rating=None):
    return SimpleNamespace(
        start_time=datetime(2031, 1, day, 10),
        status=status,
        service=SimpleNamespace(price=Decimal(price)),
        review=SimpleNamespace(rating=rating) if rating else None,
    )


def test_empty_analytics():
    out = build_provider_analytics([], 7, TODAY)
    assert out["total_bookings"] == 0
    assert out["total_revenue"] == 0
    assert out["average_rating"] == 0
    assert out["bookings_by_status"] == {"PENDING": 0, "CONFIRMED": 0, "CANCELLED": 0, "COMPLETED": 0}
    assert len(out["bookings_by_day"]) == 7
    assert all(d["count"] == 0 for d in out["bookings_by_day"])


def test_totals_status_counts_and_ratings():
    rows = [
        booking(9, "COMPLETED", "50.00", rating=5),
        booking(9, "COMPLETED", "30.00", rating=4),
        booking(10, "PENDING", "20.00"),
        booking(8, "CANCELLED", "99.00"),
    ]
    out = build_provider_analytics(rows, 3, TODAY)

    assert out["total_bookings"] == 4
    # cancelled bookings earn nothing
    assert out["total_revenue"] == 100.0
    assert out["average_rating"] == 4.5
    assert out["bookings_by_status"]["COMPLETED"] == 2
    assert out["bookings_by_status"]["CANCELLED"] == 1


def test_days_are_oldest_first_and_end_today():
    rows = [booking(9, price="50.00"), booking(10, price="20.00"), booking(10, price="5.50")]
    by_day = build_provider_analytics(rows, 3, TODAY)["bookings_by_day"]

    assert [d["date"] for d in by_day] == ["2031-01-08", "2031-01-09", "2031-01-10"]
    assert [d["count"] for d in by_day] == [0, 1, 2]
    assert by_day[2]["revenue"] == 25.5


def test_range_covers_start_of_first_day_to_end_of_today():
    start, end = analytics_range(TODAY, 30)
    assert start == datetime(2030, 12, 11, 0, 0)
    assert end.date() == TODAY and end.hour == 23 and end.minute == 59
