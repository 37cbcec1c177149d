from flask import Blueprint, request, jsonify, g

from models import db
from models.availability import Availability
from scheduling import parse_date, parse_time_of_day, validate_window
from security.rbac import require_roles, PROVIDER
from services import get_booking_service
from utils.audit import log_event
from utils.auth_context import login_required
from utils.errors import ValidationError

availability_bp = Blueprint("availability", __name__, url_prefix="/availability")


def availability_json(a: Availability) -> dict:
    return {
        "id": a.id,
        "provider_id": a.provider_id,
        "day_of_week": a.day_of_week,
        "start_time": a.start_time.strftime("%H:%M"),
        "end_time": a.end_time.strftime("%H:%M"),
        "is_recurring": a.is_recurring,
    }


@availability_bp.get("")
@require_roles(PROVIDER)
def list_availability():
    rows = (
        Availability.query
        .filter_by(provider_id=g.user.id)
        .order_by(Availability.day_of_week.asc(), Availability.start_time.asc())
        .all()
    )
    return jsonify([availability_json(a) for a in rows]), 200


@availability_bp.post("")
@require_roles(PROVIDER)
def create_availability():
    data = request.get_json(silent=True) or {}
    day = data.get("day_of_week")
    if isinstance(day, bool) or not isinstance(day, int) or not 0 <= day <= 6:
        return jsonify(error="day_of_week must be an integer 0 (Sunday) to 6 (Saturday)"), 400

    # raises ValidationError -> 400
    start_time = parse_time_of_day(data.get("start_time"))
    end_time = parse_time_of_day(data.get("end_time"))
    validate_window(start_time, end_time)

    window = Availability(
        provider_id=g.user.id,
        day_of_week=day,
        start_time=start_time,
        end_time=end_time,
        is_recurring=bool(data.get("is_recurring", True)),
    )
    db.session.add(window)
    db.session.commit()

    log_event("AVAILABILITY_CREATE", user_id=g.user.id, entity="availability", entity_id=window.id)
    return jsonify(availability_json(window)), 201


@availability_bp.delete("/<int:availability_id>")
@require_roles(PROVIDER)
def delete_availability(availability_id: int):
    window = db.session.get(Availability, availability_id)
    if not window:
        return jsonify(error="Availability not found"), 404
    if window.provider_id != g.user.id:
        return jsonify(error="Forbidden"), 403

    db.session.delete(window)
    db.session.commit()

    log_event("AVAILABILITY_DELETE", user_id=g.user.id, entity="availability", entity_id=availability_id)
    return "", 204


@availability_bp.get("/slots")
@login_required
def list_slots():
    service_id = request.args.get("service_id", type=int)
    date_str = request.args.get("date")
    if not service_id or not date_str:
        raise ValidationError("service_id and date are required")

    slots = get_booking_service().available_slots(service_id, parse_date(date_str))
    return jsonify([s.to_dict() for s in slots]), 200
