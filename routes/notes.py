# routes/notes.py
from flask import Blueprint, request, g

from auth_guard import require_auth
from models.lost_item import LostItem
from models.note import NOTE_RESOURCE_TYPES
from models.report import Report
from services import lost_articles as lost_articles_service
from services import notes as notes_service
from services import reports as reports_service
from utils.http_error import HttpError, http_response
from utils.validation import require_enum

notes_bp = Blueprint("notes", __name__, url_prefix="/api/v1/notes")


def _check_citizen_can_view(resource_id: int, kind: str) -> None:
    # citizens only read notes on resources they can already see
    if kind == "report":
        report = Report.find_by_id(resource_id)
        if report is None:
            raise HttpError(code=404, client_message="Report not found")
        if not reports_service.can_user_view(report, g.user.id):
            raise HttpError(code=403)
        return

    if LostItem.find_by_id(resource_id) is None:
        raise HttpError(code=404, client_message="Lost article not found")
    if lost_articles_service.get_by_id(resource_id, g.user.id, is_officer=False) is None:
        raise HttpError(code=403)


@notes_bp.get("/resource/<int:resource_id>")
@require_auth()
def list_notes(resource_id: int):
    kind = require_enum(request.args.get("type", "report"), NOTE_RESOURCE_TYPES, "type")
    if not g.officer:
        _check_citizen_can_view(resource_id, kind)
    return http_response(200, notes_service.list_for_resource(resource_id, kind))


@notes_bp.post("/resource/<int:resource_id>")
@require_auth(officer=True)
def create_note(resource_id: int):
    kind = request.args.get("type", "report")
    note = notes_service.create_for_resource(resource_id, request.get_json(silent=True) or {}, g.user.id, kind)
    return http_response(201, note)
