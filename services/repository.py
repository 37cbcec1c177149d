from datetime import date, datetime, time, timedelta
from typing import List, Optional

from models.availability import Availability
from models.booking import Booking, BookingStatus
from models.service import Service
from models.user import User


class SchedulingRepository:
    """
    Storage lookups the scheduling flow needs, bound to one SQLAlchemy session.

    Reads go through the same session the booking is written with, so a
    booking added in this request is visible to later reads in it.
    """

    def __init__(self, session):
        self.session = session

    def get_service(self, service_id: int) -> Optional[Service]:
        service = self.session.get(Service, service_id)
        if service is None or not service.is_active:
            return None
        return service

    def windows_for_day(self, provider_id: int, day_of_week: int) -> List[Availability]:
        return (
            self.session.query(Availability)
            .filter(Availability.provider_id == provider_id, Availability.day_of_week == day_of_week)
            .order_by(Availability.id.asc())
            .all()
        )

    def active_bookings_on(self, provider_id: int, target_date: date) -> List[Booking]:
        day_start = datetime.combine(target_date, time.min)
        day_end = day_start + timedelta(days=1)
        return (
            self.session.query(Booking)
            .filter(
                Booking.provider_id == provider_id,
                Booking.status != BookingStatus.CANCELLED,
                Booking.start_time < day_end,
                Booking.end_time > day_start,
            )
            .order_by(Booking.start_time.asc())
            .all()
        )

    def bookings_for_provider(self, provider_id: int, start: datetime, end: datetime) -> List[Booking]:
        return (
            self.session.query(Booking)
            .filter(
                Booking.provider_id == provider_id,
                Booking.start_time >= start,
                Booking.start_time <= end,
            )
            .all()
        )

    def lock_provider(self, provider_id: int) -> None:
        """
        Take the provider's write lock before availability is re-read.

        Must be a write: SQLite ignores FOR UPDATE and pysqlite only opens a
        transaction at the first DML statement. The UPDATE holds the row lock
        (PostgreSQL/MySQL) or the database write lock (SQLite) until commit or
        rollback, so a second booking for the same provider blocks here.
        """
        self.session.query(User).filter(User.id == provider_id).update(
            {User.booking_seq: User.booking_seq + 1},
            synchronize_session=False,
        )

    def add(self, row):
        self.session.add(row)
        self.session.flush()
        return row

    def commit(self):
        self.session.commit()

    def rollback(self):
        self.session.rollback()
