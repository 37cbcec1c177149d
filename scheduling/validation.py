from datetime import date, datetime, time
from typing import Optional

from utils.errors import ValidationError


def validate_duration(duration_minutes) -> int:
    # bool is an int subclass, reject it explicitly
    if isinstance(duration_minutes, bool) or not isinstance(duration_minutes, int):
        raise ValidationError("duration must be a whole number of minutes")
    if duration_minutes <= 0:
        raise ValidationError("duration must be greater than 0")
    return duration_minutes


def validate_window(start_time: time, end_time: time) -> None:
    if start_time >= end_time:
        raise ValidationError("end_time must be after start_time")


def parse_time_of_day(value) -> time:
    """Parse ``"HH:MM"`` (or ``"HH:MM:SS"``) into a naive time-of-day."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("Time must be a string like 09:30")
    try:
        parsed = time.fromisoformat(value.strip())
    except ValueError:
        raise ValidationError(f"Invalid time {value!r}. Use HH:MM") from None
    if parsed.tzinfo is not None:
        raise ValidationError("Time must not carry a timezone")
    return parsed.replace(microsecond=0)


def parse_date(value) -> date:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("date is required")
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        raise ValidationError("Invalid date. Use YYYY-MM-DD") from None


def parse_start(time_value, date_value: Optional[str] = None) -> datetime:
    """
    Resolve a booking start from the request.

    ``time_value`` is either a full ISO datetime (``2031-01-06T10:00:00``)
    or a time-of-day (``10:00``) that is combined with ``date_value``.
    """
    if not isinstance(time_value, str) or not time_value.strip():
        raise ValidationError("time is required")
    raw = time_value.strip()

    if "T" in raw or " " in raw:
        try:
            start = datetime.fromisoformat(raw)
        except ValueError:
            raise ValidationError("Invalid time. Use ISO e.g. 2031-01-06T10:00:00") from None
        if start.tzinfo is not None:
            raise ValidationError("Times are local and must not carry a timezone")
        return _on_the_minute(start)

    if not date_value:
        raise ValidationError("date is required when time is HH:MM")
    return _on_the_minute(datetime.combine(parse_date(date_value), parse_time_of_day(raw)))


def _on_the_minute(start: datetime) -> datetime:
    if start.second or start.microsecond:
        raise ValidationError("Booking times must be whole minutes, e.g. 10:00")
    return start
