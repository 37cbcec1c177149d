from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Iterable

from models.booking import BookingStatus


def analytics_range(today: date, days: int):
    """Window the provider dashboard covers: start of (today - days) .. end of today."""
    start = datetime.combine(today - timedelta(days=days), time.min)
    end = datetime.combine(today, time.max)
    return start, end


def _revenue(bookings) -> float:
    total = sum(
        (Decimal(b.service.price) for b in bookings if b.status != BookingStatus.CANCELLED),
        Decimal("0"),
    )
    return float(total)


def build_provider_analytics(bookings: Iterable, days: int, today: date) -> dict:
    """
    Aggregate a provider's bookings for the analytics dashboard.

    ``bookings`` must already be limited to ``analytics_range(today, days)``
    and expose ``status``, ``start_time``, ``service.price`` and ``review``.
    Cancelled bookings count towards totals and status counts but not revenue.
    """
    bookings = list(bookings)

    ratings = [b.review.rating for b in bookings if getattr(b, "review", None) is not None]
    average_rating = round(sum(ratings) / len(ratings), 2) if ratings else 0

    by_status = {status: 0 for status in BookingStatus.ALL}
    for b in bookings:
        by_status[b.status] = by_status.get(b.status, 0) + 1

    by_day = []
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        day_bookings = [b for b in bookings if b.start_time.date() == day]
        by_day.append({
            "date": day.isoformat(),
            "count": len(day_bookings),
            "revenue": _revenue(day_bookings),
        })

    return {
        "total_bookings": len(bookings),
        "total_revenue": _revenue(bookings),
        "average_rating": average_rating,
        "bookings_by_status": by_status,
        "bookings_by_day": by_day,
    }
