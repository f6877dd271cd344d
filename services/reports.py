# services/reports.py
from __future__ import annotations

from typing import Iterable, List, Optional

from flask import current_app
from PIL import UnidentifiedImageError
from werkzeug.datastructures import FileStorage

from db import db
from models.report import REPORT_STATUSES, Report, ReportImage
from models.user import User
from services import audit
from services import files as files_service
from services import personal_details as personal_details_service
from utils.http_error import HttpError
from utils.pii_scrubber import scrub_pii
from utils.priority import get_text_priority
from utils.validation import optional_float, require_enum, require_str

__all__ = [
    "create",
    "get_by_id",
    "can_modify",
    "can_user_view",
    "get_all",
    "update_status",
    "delete",
    "serialize",
]


def serialize(report: Report, viewer_id: Optional[int] = None) -> dict:
    data = report.to_dict()
    data["images"] = [
        files_service.generate_file_token(img.image_path, viewer_id) for img in report.images
    ]
    return data


def create(files: Optional[Iterable[FileStorage]], body: dict, user_id: int) -> dict:
    """Create a report and its images in a single transaction."""
    description = require_str(body, "description", strip=True)
    longitude = optional_float(body, "longitude")
    latitude = optional_float(body, "latitude")
    if not description:
        raise HttpError(code=400, client_message="description: must not be empty")

    saved: List[str] = []
    try:
        report = Report(
            description=scrub_pii(description),
            longitude=longitude,
            latitude=latitude,
            user_id=user_id,
            status="PENDING",
            priority=get_text_priority(description),
        )
        report.save(commit=False)
        audit.record_incident_event(actor_id=user_id, incident_id=report.id, action="create", commit=False)

        for f in files or []:
            path = files_service.save_upload(f)
            saved.append(path)
            files_service.sanitize_image(path)
            files_service.record_upload(path, user_id, commit=False)
            ReportImage(report_id=report.id, image_path=path).save(commit=False)

        db.session.commit()
    except UnidentifiedImageError:
        db.session.rollback()
        files_service.discard_uploads(saved)
        raise HttpError(code=400, client_message="Unsupported image")
    except Exception:
        db.session.rollback()
        files_service.discard_uploads(saved)
        raise

    current_app.logger.info("[reports] created id=%s priority=%s by uid=%s", report.id, report.priority, user_id)
    return serialize(report, user_id)


def get_by_id(id_, requesting_user_id: Optional[int] = None) -> Optional[dict]:
    if not id_:
        raise HttpError(code=400)

    report = Report.find_by_id(id_)
    if report is None:
        return None

    data = serialize(report, requesting_user_id if isinstance(requesting_user_id, int) else None)
    data["witnesses"] = personal_details_service.find_by_report_id(report.id)
    return data


def can_modify(id_, user_id: int, is_officer: bool = False) -> bool:
    if is_officer:
        return True
    report = Report.find_by_id(id_)
    return bool(report and report.user_id == user_id)


def can_user_view(report: dict | Report, user_id: int) -> bool:
    user = User.find_by_id(user_id)
    if user is None:
        return False
    owner = report["user_id"] if isinstance(report, dict) else report.user_id
    return bool(user.is_officer) or owner == user_id


def get_all(user_id: Optional[int] = None, limit: int = 100) -> List[dict]:
    """Officers (user_id=None) get everything by priority; citizens get their own."""
    order = Report.priority.desc()
    if user_id is None:
        rows = Report.all(limit, order)
    else:
        rows = Report.find_all_by("user_id", user_id, order)
    return [serialize(r, user_id) for r in rows]


def update_status(id_, body: dict, actor_id: Optional[int] = None) -> dict:
    status = require_enum((body or {}).get("status"), REPORT_STATUSES)

    report = Report.find_by_id(id_)
    if report is None:
        raise HttpError(code=404)

    report.status = status
    report.save(commit=False)
    audit.record_incident_event(
        actor_id=actor_id if actor_id is not None else report.user_id,
        incident_id=report.id,
        action="status_update",
        metadata={"status": status},
        commit=False,
    )
    db.session.commit()
    return serialize(report, actor_id)


def delete(id_, actor_id: Optional[int] = None) -> bool:
    deleted = Report.delete_where("id", id_) > 0
    if deleted:
        audit.record_incident_event(actor_id=actor_id, incident_id=id_, action="delete")
    return deleted
