# routes/reports.py
from __future__ import annotations

from flask import Blueprint, request, g, current_app

from auth_guard import require_auth
from services import personal_details as personal_details_service
from services import reports as reports_service
from utils.http_error import HttpError, http_response
from utils.validation import ValidationError, parse_id

reports_bp = Blueprint("reports", __name__, url_prefix="/api/v1/reports")


def _body() -> dict:
    if request.is_json:
        return request.get_json(silent=True) or {}
    return request.form.to_dict()


def _id(value, field="reportId") -> int:
    try:
        return parse_id(value, field)
    except ValidationError:
        raise HttpError(code=400, client_message=f"Invalid {field}")


@reports_bp.post("")
@require_auth()
def create_report():
    files = request.files.getlist("images")
    report = reports_service.create(files, _body(), g.user.id)
    return http_response(201, report)


@reports_bp.get("")
@require_auth()
def list_reports():
    limit = request.args.get("limit", type=int) or 100
    if g.officer:
        return http_response(200, reports_service.get_all(None, limit))
    return http_response(200, reports_service.get_all(g.user.id, limit))


@reports_bp.get("/<report_id>")
@require_auth()
def get_report(report_id):
    report = reports_service.get_by_id(_id(report_id), g.user.id)
    if report is None:
        raise HttpError(code=404, client_message="Report not found")
    if not reports_service.can_user_view(report, g.user.id):
        raise HttpError(code=403)
    return http_response(200, report)


@reports_bp.patch("/update-status/<report_id>")
@require_auth(officer=True)
def update_status(report_id):
    data = request.get_json(silent=True) or {}
    report = reports_service.update_status(_id(report_id), data, g.user.id)
    current_app.logger.info("[reports] status id=%s -> %s by uid=%s", report_id, report["status"], g.user.id)
    return http_response(200, report)


@reports_bp.delete("/<report_id>")
@require_auth()
def delete_report(report_id):
    rid = _id(report_id)
    if not reports_service.can_modify(rid, g.user.id, g.officer):
        raise HttpError(code=403)
    if not reports_service.delete(rid, g.user.id):
        raise HttpError(code=404, client_message="Report not found")
    return http_response(204)


@reports_bp.post("/witness/<report_id>")
@require_auth()
def add_witness(report_id):
    rid = _id(report_id)
    if not reports_service.can_modify(rid, g.user.id, g.officer):
        raise HttpError(code=403)
    witness = personal_details_service.create_report_witness(request.get_json(silent=True) or {}, rid)
    return http_response(201, witness.to_dict())


@reports_bp.delete("/witness/<report_id>/<witness_id>")
@require_auth()
def delete_witness(report_id, witness_id):
    rid = _id(report_id)
    if not reports_service.can_modify(rid, g.user.id, g.officer):
        raise HttpError(code=403)
    if not personal_details_service.delete_report_witness(rid, witness_id):
        raise HttpError(code=404, client_message="Witness not found")
    return http_response(204)
