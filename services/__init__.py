from datetime import datetime

from flask import current_app

from models import db
from .repository import SchedulingRepository
from .booking_service import BookingService


def get_booking_service() -> BookingService:
    """Build the booking service for the current request from app config and extensions."""
    return BookingService(
        SchedulingRepository(db.session),
        mailer=current_app.extensions.get("mailer"),
        clock=current_app.extensions.get("clock", datetime.now),
        cancel_cutoff_hours=current_app.config.get("CANCEL_CUTOFF_HOURS", 12),
    )
