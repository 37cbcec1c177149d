from datetime import datetime

from flask import Blueprint, request, jsonify, g, current_app

from models import db
from security.rbac import require_roles, PROVIDER
from services.analytics import analytics_range, build_provider_analytics
from services.repository import SchedulingRepository

analytics_bp = Blueprint("analytics", __name__, url_prefix="/analytics")


@analytics_bp.get("")
@require_roles(PROVIDER)
def provider_analytics():
    default_days = current_app.config.get("ANALYTICS_DEFAULT_DAYS", 30)
    max_days = current_app.config.get("ANALYTICS_MAX_DAYS", 365)
    days = request.args.get("days", type=int) or default_days
    if days < 1 or days > max_days:
        return jsonify(error=f"days must be between 1 and {max_days}"), 400

    today = current_app.extensions.get("clock", datetime.now)().date()
    start, end = analytics_range(today, days)
    bookings = SchedulingRepository(db.session).bookings_for_provider(g.user.id, start, end)

    return jsonify(build_provider_analytics(bookings, days, today)), 200
