# services/lost_articles.py
from __future__ import annotations

from typing import Iterable, List, Optional

from flask import current_app
from PIL import UnidentifiedImageError
from werkzeug.datastructures import FileStorage

from db import db
from models.lost_item import LOST_ITEM_STATUSES, RETURNED_STATUSES, LostItem
from models.report import ReportImage
from services import files as files_service
from services import personal_details as personal_details_service
from utils.http_error import HttpError
from utils.pii_scrubber import scrub_pii
from utils.validation import (
    ValidationError,
    optional_str,
    parse_id,
    require_enum,
    require_float,
    require_str,
)

__all__ = [
    "create",
    "get_by_id",
    "get_all",
    "can_modify",
    "update_by_id",
    "update_status",
    "delete_by_id",
    "serialize",
]

TEXT_FIELDS = ("name", "description", "branch")
OPTIONAL_TEXT_FIELDS = ("serial_number", "color", "model")
FLOAT_FIELDS = ("longitude", "latitude")


def _validate(body: dict, *, partial: bool = False) -> dict:
    body = body or {}
    out = {}
    for f in TEXT_FIELDS:
        if not partial or body.get(f) is not None:
            out[f] = require_str(body, f, strip=True)
    for f in OPTIONAL_TEXT_FIELDS:
        if body.get(f) is not None:
            out[f] = optional_str(body, f, strip=True)
    for f in FLOAT_FIELDS:
        if not partial or body.get(f) not in (None, ""):
            out[f] = require_float(body, f)
    if not partial or body.get("status") is not None:
        out["status"] = require_enum(body.get("status"), LOST_ITEM_STATUSES)
    if "description" in out:
        out["description"] = scrub_pii(out["description"])
    return out


def serialize(item: LostItem, viewer_id: Optional[int] = None, *, with_details: bool = False) -> dict:
    data = item.to_dict()
    data["images"] = [
        files_service.generate_file_token(img.image_path, viewer_id) for img in item.images
    ]
    if with_details:
        data["personal_details"] = personal_details_service.find_by_lost_article_id(item.id)
    return data


def create(files: Optional[Iterable[FileStorage]], body: dict, user_id: int) -> dict:
    fields = _validate(body)
    saved: List[str] = []
    try:
        item = LostItem(user_id=user_id, **fields)
        item.save(commit=False)

        for f in files or []:
            path = files_service.save_upload(f)
            saved.append(path)
            files_service.sanitize_image(path)
            files_service.record_upload(path, user_id, commit=False)
            ReportImage(lost_article_id=item.id, image_path=path).save(commit=False)

        db.session.commit()
    except UnidentifiedImageError:
        db.session.rollback()
        files_service.discard_uploads(saved)
        raise HttpError(code=400, client_message="Unsupported image")
    except Exception:
        db.session.rollback()
        files_service.discard_uploads(saved)
        raise

    current_app.logger.info("[lost] created id=%s by uid=%s", item.id, user_id)
    return serialize(item, user_id)


def get_by_id(id_, user_id: int, is_officer: bool = False) -> Optional[dict]:
    """
    Officers see everything. Citizens see their own items, plus anyone's item
    once it has been found or closed.
    """
    if is_officer:
        result = LostItem.find_by_id(id_)
    else:
        result = LostItem.find_by(["id", "user_id"], [id_, user_id])

    if result is None and not is_officer:
        fallback = LostItem.find_by_id(id_)
        if fallback is not None and fallback.status in RETURNED_STATUSES:
            result = fallback

    if result is None:
        return None

    return serialize(result, user_id, with_details=True)


def get_all(limit: int = 100) -> List[dict]:
    return [serialize(i) for i in LostItem.all(limit, LostItem.created_at.desc())]


def can_modify(id_, user_id: int, is_officer: bool = False) -> bool:
    if is_officer:
        return True

    item = LostItem.find_by_id(id_)
    if item is None:
        return False
    return item.user_id == user_id and item.status not in RETURNED_STATUSES


def update_by_id(id_, body: dict, user_id: int, is_officer: bool = False) -> Optional[dict]:
    try:
        id_ = parse_id(id_)
    except ValidationError:
        raise HttpError(code=400, client_message="Invalid lost article id")

    if not can_modify(id_, user_id, is_officer):
        raise HttpError(code=401)

    item = LostItem.find_by_id(id_)
    if item is None:
        return None

    changes = _validate(body, partial=True)
    if changes:
        for key, val in changes.items():
            setattr(item, key, val)
        item.save()
        current_app.logger.info("[lost] updated id=%s fields=%s by uid=%s", id_, sorted(changes), user_id)

    return serialize(item, user_id)


def update_status(id_, status, user_id: int, is_officer: bool = False) -> Optional[dict]:
    parsed = require_enum(status, LOST_ITEM_STATUSES)
    return update_by_id(id_, {"status": parsed}, user_id, is_officer)


def delete_by_id(id_) -> bool:
    if id_ is None or id_ == "":
        raise HttpError(code=400, client_message="lostArticleId must be included")
    try:
        numeric = parse_id(id_)
    except ValidationError:
        raise HttpError(code=400, client_message="lostArticleId must be included")

    return LostItem.delete_where("id", numeric) != 0
