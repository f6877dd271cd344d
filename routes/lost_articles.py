# routes/lost_articles.py
from __future__ import annotations

from flask import Blueprint, request, g

from auth_guard import require_auth
from services import lost_articles as lost_articles_service
from services import personal_details as personal_details_service
from utils.http_error import HttpError, http_response
from utils.validation import ValidationError, parse_id

lost_articles_bp = Blueprint("lost_articles", __name__, url_prefix="/api/v1/lost-articles")


def _body() -> dict:
    if request.is_json:
        return request.get_json(silent=True) or {}
    return request.form.to_dict()


@lost_articles_bp.post("")
@require_auth()
def create_lost_article():
    item = lost_articles_service.create(request.files.getlist("images"), _body(), g.user.id)
    return http_response(201, item)


@lost_articles_bp.get("/all")
@require_auth(officer=True)
def list_lost_articles():
    limit = request.args.get("limit", type=int) or 100
    return http_response(200, lost_articles_service.get_all(limit))


@lost_articles_bp.get("/<lost_article_id>")
@require_auth()
def get_lost_article(lost_article_id):
    try:
        lid = parse_id(lost_article_id, "lostArticleId")
    except ValidationError:
        raise HttpError(code=400, client_message="Invalid lost article id")

    item = lost_articles_service.get_by_id(lid, g.user.id, g.officer)
    if item is None:
        raise HttpError(code=404, client_message="Lost article not found")
    return http_response(200, item)


@lost_articles_bp.patch("/<lost_article_id>")
@require_auth()
def update_lost_article(lost_article_id):
    item = lost_articles_service.update_by_id(lost_article_id, _body(), g.user.id, g.officer)
    if item is None:
        raise HttpError(code=404, client_message="Lost article not found")
    return http_response(200, item)


@lost_articles_bp.patch("/<lost_article_id>/status")
@require_auth()
def update_lost_article_status(lost_article_id):
    data = request.get_json(silent=True) or {}
    item = lost_articles_service.update_status(lost_article_id, data.get("status"), g.user.id, g.officer)
    if item is None:
        raise HttpError(code=404, client_message="Lost article not found")
    return http_response(200, item)


@lost_articles_bp.delete("/<lost_article_id>")
@require_auth()
def delete_lost_article(lost_article_id):
    try:
        lid = parse_id(lost_article_id, "lostArticleId")
    except ValidationError:
        raise HttpError(code=400, client_message="lostArticleId must be included")
    if not lost_articles_service.can_modify(lid, g.user.id, g.officer):
        raise HttpError(code=401)
    if not lost_articles_service.delete_by_id(lid):
        raise HttpError(code=404, client_message="Lost article not found")
    return http_response(204)


@lost_articles_bp.post("/<lost_article_id>/personal-details")
@require_auth()
def add_personal_details(lost_article_id):
    try:
        lid = parse_id(lost_article_id, "lostArticleId")
    except ValidationError:
        raise HttpError(code=400, client_message="Invalid lost article id")
    if not lost_articles_service.can_modify(lid, g.user.id, g.officer):
        raise HttpError(code=401)

    details = personal_details_service.create_lost_article_personal_details(
        request.get_json(silent=True) or {}, lid
    )
    return http_response(201, details.to_dict())


@lost_articles_bp.delete("/<lost_article_id>/personal-details/<pd_id>")
@require_auth()
def delete_personal_details(lost_article_id, pd_id):
    try:
        lid = parse_id(lost_article_id, "lostArticleId")
    except ValidationError:
        raise HttpError(code=400, client_message="lostArticleId and personalDetailsId must be included")
    if not lost_articles_service.can_modify(lid, g.user.id, g.officer):
        raise HttpError(code=401)
    if not personal_details_service.delete_lost_article_personal_details(lid, pd_id):
        raise HttpError(code=404, client_message="Personal details not found")
    return http_response(204)
