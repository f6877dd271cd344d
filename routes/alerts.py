# routes/alerts.py
from flask import Blueprint, request, g

from auth_guard import require_auth
from services import alerts as alerts_service
from utils.http_error import HttpError, http_response

alerts_bp = Blueprint("alerts", __name__, url_prefix="/api/v1/alerts")


@alerts_bp.get("")
@require_auth()
def list_alerts():
    limit = request.args.get("limit", type=int) or 100
    return http_response(200, alerts_service.list_alerts(limit))


@alerts_bp.get("/<int:alert_id>")
@require_auth()
def get_alert(alert_id: int):
    alert = alerts_service.get_alert(alert_id)
    if alert is None:
        raise HttpError(code=404, client_message="Alert not found")
    return http_response(200, alert)


@alerts_bp.post("")
@require_auth(officer=True)
def create_alert():
    alert = alerts_service.create_alert(request.get_json(silent=True) or {}, g.user.id)
    return http_response(201, alert)


@alerts_bp.put("/<int:alert_id>")
@require_auth(officer=True)
def update_alert(alert_id: int):
    alert = alerts_service.update_alert(alert_id, request.get_json(silent=True) or {})
    if alert is None:
        raise HttpError(code=404, client_message="Alert not found")
    return http_response(200, alert)


@alerts_bp.delete("/<int:alert_id>")
@require_auth(officer=True)
def delete_alert(alert_id: int):
    if not alerts_service.delete_alert(alert_id):
        raise HttpError(code=404, client_message="Alert not found")
    return http_response(204)
