from flask import Blueprint, jsonify

from .auth import auth_bp
from .users import users_bp
from .services import services_bp
from .availability import availability_bp
from .bookings import bookings_bp
from .analytics import analytics_bp

health_bp = Blueprint("health", __name__)


@health_bp.get("/health")
def health():
    return jsonify(status="ok"), 200


ALL_BLUEPRINTS = (
    health_bp,
    auth_bp,
    users_bp,
    services_bp,
    availability_bp,
    bookings_bp,
    analytics_bp,
)
