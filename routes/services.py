from decimal import Decimal, InvalidOperation

from flask import Blueprint, request, jsonify, g

from models import db
from models.service import Service
from security.rbac import require_roles, PROVIDER
from utils.audit import log_event

services_bp = Blueprint("services", __name__, url_prefix="/services")


def service_json(s: Service, with_provider: bool = False) -> dict:
    out = {
        "id": s.id,
        "provider_id": s.provider_id,
        "name": s.name,
        "description": s.description,
        "duration": s.duration_minutes,
        "price": float(s.price),
        "created_at": s.created_at.isoformat(),
    }
    if with_provider:
        out["provider"] = {"id": s.provider.id, "name": s.provider.name}
    return out


def _parse_service_fields(data: dict):
    """Returns ``(fields, error)`` for the create/update payload."""
    name = (data.get("name") or "").strip()
    description = (data.get("description") or "").strip() or None
    if not name or len(name) > 120:
        return None, "name is required (max 120 characters)"

    try:
        duration = int(data.get("duration"))
    except (TypeError, ValueError):
        return None, "duration must be a whole number of minutes"
    if duration <= 0:
        return None, "duration must be greater than 0"

    try:
        price = Decimal(str(data.get("price", 0)))
    except InvalidOperation:
        return None, "price must be a number"
    if not price.is_finite() or price < 0:
        return None, "price must be 0 or more"

    return {
        "name": name,
        "description": description,
        "duration_minutes": duration,
        "price": price.quantize(Decimal("0.01")),
    }, None


def _owned_service(service_id: int):
    service = db.session.get(Service, service_id)
    if not service or not service.is_active:
        return None, (jsonify(error="Service not found"), 404)
    if service.provider_id != g.user.id:
        return None, (jsonify(error="Forbidden"), 403)
    return service, None


@services_bp.get("")
def list_services():
    q = Service.query.filter(Service.is_active.is_(True))
    provider_id = request.args.get("provider_id", type=int)
    if provider_id:
        q = q.filter(Service.provider_id == provider_id)

    rows = q.order_by(Service.created_at.asc(), Service.id.asc()).all()
    return jsonify([service_json(s, with_provider=True) for s in rows]), 200


@services_bp.post("")
@require_roles(PROVIDER)
def create_service():
    fields, error = _parse_service_fields(request.get_json(silent=True) or {})
    if error:
        return jsonify(error=error), 400

    service = Service(provider_id=g.user.id, **fields)
    db.session.add(service)
    db.session.commit()

    log_event("SERVICE_CREATE", user_id=g.user.id, entity="service", entity_id=service.id)
    return jsonify(service_json(service)), 201


@services_bp.get("/<int:service_id>")
def get_service(service_id: int):
    service = db.session.get(Service, service_id)
    if not service or not service.is_active:
        return jsonify(error="Service not found"), 404
    return jsonify(service_json(service, with_provider=True)), 200


@services_bp.put("/<int:service_id>")
@require_roles(PROVIDER)
def update_service(service_id: int):
    service, failure = _owned_service(service_id)
    if failure:
        return failure

    fields, error = _parse_service_fields(request.get_json(silent=True) or {})
    if error:
        return jsonify(error=error), 400

    for key, value in fields.items():
        setattr(service, key, value)
    db.session.commit()

    log_event("SERVICE_UPDATE", user_id=g.user.id, entity="service", entity_id=service.id)
    return jsonify(service_json(service)), 200


@services_bp.delete("/<int:service_id>")
@require_roles(PROVIDER)
def delete_service(service_id: int):
    service, failure = _owned_service(service_id)
    if failure:
        return failure

    service.is_active = False
    db.session.commit()

    log_event("SERVICE_DELETE", user_id=g.user.id, entity="service", entity_id=service.id)
    return "", 204
