from flask import Blueprint, request, jsonify, g

from models import db
from models.user import User
from routes.auth import user_json, is_valid_email
from utils.audit import log_event
from utils.auth_context import login_required

users_bp = Blueprint("users", __name__, url_prefix="/users")

# field -> max length
PROFILE_FIELDS = {"name": 120, "phone": 30, "address": 255}


@users_bp.get("/profile")
@login_required
def get_profile():
    return jsonify(user_json(g.user)), 200


@users_bp.put("/profile")
@login_required
def update_profile():
    data = request.get_json(silent=True) or {}

    for field, max_len in PROFILE_FIELDS.items():
        value = data.get(field)
        if value is None:
            continue
        if not isinstance(value, str) or len(value.strip()) > max_len:
            return jsonify(error=f"Invalid {field}"), 400
        setattr(g.user, field, value.strip() or None)

    email = data.get("email")
    if email is not None:
        email = email.strip().lower() if isinstance(email, str) else ""
        if not is_valid_email(email):
            return jsonify(error="Invalid email"), 400
        taken = User.query.filter(User.email == email, User.id != g.user.id).first()
        if taken:
            db.session.rollback()
            return jsonify(error="Email already in use"), 409
        g.user.email = email

    db.session.commit()
    log_event("PROFILE_UPDATE", user_id=g.user.id)
    return jsonify(user_json(g.user)), 200
