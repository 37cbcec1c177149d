from flask import Blueprint, request, jsonify, g
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError

from models import db
from models.booking import Booking, BookingStatus
from models.review import Review
from routes.services import service_json
from scheduling import parse_start
from security.rbac import require_roles, PROVIDER
from services import get_booking_service
from utils.audit import log_event
from utils.auth_context import login_required

bookings_bp = Blueprint("bookings", __name__, url_prefix="/bookings")


def _person(user) -> dict:
    return {"id": user.id, "name": user.name, "email": user.email}


def booking_json(b: Booking) -> dict:
    return {
        "id": b.id,
        "status": b.status,
        "start_time": b.start_time.isoformat(),
        "end_time": b.end_time.isoformat(),
        "notes": b.notes,
        "created_at": b.created_at.isoformat(),
        "cancelled_at": b.cancelled_at.isoformat() if b.cancelled_at else None,
        "service": service_json(b.service),
        "customer": _person(b.customer),
        "provider": _person(b.provider),
        "review": {"rating": b.review.rating, "comment": b.review.comment} if b.review else None,
    }


def _optional_int(data: dict, key: str):
    value = data.get(key)
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return "invalid"


@bookings_bp.post("")
@login_required
def create_booking():
    data = request.get_json(silent=True) or {}
    service_id = _optional_int(data, "service_id")
    provider_id = _optional_int(data, "provider_id")
    if service_id in (None, "invalid"):
        return jsonify(error="service_id required"), 400
    if provider_id == "invalid":
        return jsonify(error="Invalid provider_id"), 400

    notes = data.get("notes")
    if notes is not None and not isinstance(notes, str):
        return jsonify(error="notes must be a string"), 400

    start_time = parse_start(data.get("time"), data.get("date"))
    booking, emails = get_booking_service().create_booking(
        g.user,
        service_id,
        start_time,
        provider_id=provider_id,
        notes=(notes or "").strip() or None,
    )

    log_event(
        "BOOKING_CREATE",
        user_id=g.user.id,
        entity="booking",
        entity_id=booking.id,
        metadata={
            "service_id": booking.service_id,
            "start_time": booking.start_time.isoformat(),
            "emails": {who: {"sent": sent, "error": error} for who, (sent, error) in emails.items()},
        },
    )
    return jsonify(booking_json(booking)), 201


@bookings_bp.get("")
@login_required
def list_bookings():
    # bookings where the caller is either side
    q = Booking.query.filter(or_(Booking.customer_id == g.user.id, Booking.provider_id == g.user.id))
    status = (request.args.get("status") or "").strip().upper()
    if status:
        q = q.filter(Booking.status == status)

    rows = q.order_by(Booking.start_time.asc()).all()
    return jsonify([booking_json(b) for b in rows]), 200


@bookings_bp.post("/<int:booking_id>/cancel")
@login_required
def cancel_booking(booking_id: int):
    booking = get_booking_service().cancel_booking(db.session.get(Booking, booking_id), g.user)

    log_event("BOOKING_CANCEL", user_id=g.user.id, entity="booking", entity_id=booking.id)
    return jsonify(booking_json(booking)), 200


@bookings_bp.post("/<int:booking_id>/status")
@require_roles(PROVIDER)
def update_booking_status(booking_id: int):
    data = request.get_json(silent=True) or {}
    status = (data.get("status") or "").strip().upper()

    booking = get_booking_service().update_status(db.session.get(Booking, booking_id), g.user, status)

    log_event(
        "BOOKING_STATUS_UPDATE",
        user_id=g.user.id,
        entity="booking",
        entity_id=booking.id,
        metadata={"status": status},
    )
    return jsonify(booking_json(booking)), 200


@bookings_bp.post("/<int:booking_id>/review")
@login_required
def review_booking(booking_id: int):
    data = request.get_json(silent=True) or {}
    rating = data.get("rating")
    comment = (data.get("comment") or "").strip() or None

    if isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5:
        return jsonify(error="rating must be an integer from 1 to 5"), 400

    booking = db.session.get(Booking, booking_id)
    if not booking or booking.customer_id != g.user.id:
        return jsonify(error="Booking not found"), 404
    if booking.status != BookingStatus.COMPLETED:
        return jsonify(error="Only completed bookings can be reviewed"), 400

    review = Review(booking_id=booking.id, customer_id=g.user.id, rating=rating, comment=comment)
    db.session.add(review)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        # uq on reviews.booking_id
        return jsonify(error="Booking already reviewed"), 409

    log_event("BOOKING_REVIEW", user_id=g.user.id, entity="booking", entity_id=booking.id,
              metadata={"rating": rating})
    return jsonify(id=review.id, rating=review.rating, comment=review.comment), 201
