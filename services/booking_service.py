"""
Booking flow built on the slot resolver.

Listing slots and creating a booking both go through ``resolve_slots``;
creation re-runs it under the provider lock so a slot taken between the
listing and the submit is refused instead of double-booked.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Callable, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from models.booking import Booking, BookingStatus
from scheduling import Slot, day_of_week, resolve_slots
from utils.emailer import booking_confirmation_email, provider_notification_email
from utils.errors import ConflictError, ForbiddenError, InternalError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

# status -> statuses a provider may move a booking to
ALLOWED_TRANSITIONS = {
    BookingStatus.PENDING: {BookingStatus.CONFIRMED, BookingStatus.CANCELLED},
    BookingStatus.CONFIRMED: {BookingStatus.COMPLETED, BookingStatus.CANCELLED},
    BookingStatus.CANCELLED: set(),
    BookingStatus.COMPLETED: set(),
}


class BookingService:
    def __init__(self, repository, mailer=None, clock: Callable[[], datetime] = datetime.now,
                 cancel_cutoff_hours: int = 12):
        self.repository = repository
        self.mailer = mailer
        self.clock = clock
        self.cancel_cutoff_hours = cancel_cutoff_hours

    def _service_or_404(self, service_id):
        service = self.repository.get_service(service_id)
        if service is None:
            raise NotFoundError("Service not found")
        return service

    def _slots_for(self, service, target_date: date) -> List[Slot]:
        windows = self.repository.windows_for_day(service.provider_id, day_of_week(target_date))
        if not windows:
            return []
        bookings = self.repository.active_bookings_on(service.provider_id, target_date)
        return resolve_slots(service, windows, bookings, target_date)

    def available_slots(self, service_id: int, target_date: date) -> List[Slot]:
        service = self._service_or_404(service_id)
        return self._slots_for(service, target_date)

    def create_booking(self, customer, service_id: int, start_time: datetime,
                       provider_id: Optional[int] = None, notes: Optional[str] = None):
        """
        Persist a PENDING booking for ``customer`` if ``start_time`` is still free.

        Returns ``(booking, email_results)`` where ``email_results`` maps
        ``"customer"``/``"provider"`` to the mailer's ``(sent, error)`` pair.
        """
        service = self._service_or_404(service_id)
        if provider_id is not None and provider_id != service.provider_id:
            raise ValidationError("provider_id does not match the service provider")

        end_time = start_time + timedelta(minutes=service.duration_minutes)
        if start_time <= self.clock():
            raise ValidationError("Cannot book past/started slots")

        try:
            self.repository.lock_provider(service.provider_id)
            wanted = Slot(start_time, end_time)
            if wanted not in self._slots_for(service, start_time.date()):
                raise ConflictError("Slot is no longer available")

            booking = self.repository.add(Booking(
                customer_id=customer.id,
                provider_id=service.provider_id,
                service_id=service.id,
                start_time=start_time,
                end_time=end_time,
                notes=notes,
                status=BookingStatus.PENDING,
            ))
            self.repository.commit()
        except ConflictError:
            self.repository.rollback()
            logger.info(
                "Booking refused for provider %s at %s: slot taken or outside availability",
                service.provider_id, start_time.isoformat(),
            )
            raise
        except SQLAlchemyError as exc:
            self.repository.rollback()
            logger.exception("Saving booking for provider %s failed", service.provider_id)
            raise InternalError("Could not save booking") from exc

        logger.info("Booking %s created for provider %s at %s", booking.id, booking.provider_id,
                    booking.start_time.isoformat())
        return booking, self._notify(booking)

    def _notify(self, booking) -> dict:
        if self.mailer is None:
            return {}

        service = booking.service
        customer_name = booking.customer.name or "Customer"
        provider_name = booking.provider.name or "Provider"
        results = {}
        results["customer"] = self.mailer.send(
            booking.customer.email,
            "Booking Confirmation",
            booking_confirmation_email(customer_name, provider_name, service.name,
                                       booking.start_time, service.duration_minutes, service.price),
        )
        results["provider"] = self.mailer.send(
            booking.provider.email,
            "New Booking Notification",
            provider_notification_email(provider_name, customer_name, service.name,
                                        booking.start_time, service.duration_minutes, service.price),
        )
        for who, (sent, error) in results.items():
            if not sent:
                logger.warning("Booking %s: %s email not sent (%s)", booking.id, who, error)
        return results

    def cancel_booking(self, booking, actor):
        if booking is None or booking.customer_id != actor.id:
            raise NotFoundError("Booking not found")
        if booking.status not in (BookingStatus.PENDING, BookingStatus.CONFIRMED):
            raise ValidationError("Booking not cancellable")

        cutoff = timedelta(hours=self.cancel_cutoff_hours)
        if booking.start_time - self.clock() < cutoff:
            raise ForbiddenError(
                f"Cancellation not allowed within {self.cancel_cutoff_hours} hours of start"
            )

        booking.status = BookingStatus.CANCELLED
        booking.cancelled_at = self.clock()
        self.repository.commit()
        return booking

    def update_status(self, booking, provider, status: str):
        if booking is None or booking.provider_id != provider.id:
            raise NotFoundError("Booking not found")
        if status not in BookingStatus.ALL:
            raise ValidationError(f"status must be one of {', '.join(BookingStatus.ALL)}")
        if status not in ALLOWED_TRANSITIONS[booking.status]:
            raise ValidationError(f"Cannot change booking from {booking.status} to {status}")

        booking.status = status
        if status == BookingStatus.CANCELLED:
            booking.cancelled_at = self.clock()
        self.repository.commit()
        return booking
