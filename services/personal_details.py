# services/personal_details.py
from __future__ import annotations

from typing import List, Optional

from models.personal_details import PersonalDetails
from utils.http_error import HttpError
from utils.validation import ValidationError, parse_id, require_date, require_str

__all__ = [
    "create",
    "create_report_witness",
    "create_lost_article_personal_details",
    "delete_report_witness",
    "delete_lost_article_personal_details",
    "find_by_report_id",
    "find_by_lost_article_id",
]


def _require_ids(message: str, *ids) -> List[int]:
    if any(i is None or i == "" for i in ids):
        raise HttpError(code=400, client_message=message)
    try:
        return [parse_id(i) for i in ids]
    except ValidationError:
        raise HttpError(code=400, client_message=message)


def create(body: dict, *, report_id: Optional[int] = None,
           lost_article_id: Optional[int] = None) -> PersonalDetails:
    first_name = require_str(body, "first_name", strip=True)
    last_name = require_str(body, "last_name", strip=True)
    dob = require_date(body, "date_of_birth")
    contact = require_str(body, "contact_number", strip=True)

    details = PersonalDetails(
        first_name=first_name,
        last_name=last_name,
        date_of_birth=dob.isoformat(),
        contact_number=contact,
        report_id=report_id,
        lost_article_id=lost_article_id,
    )
    return details.save()


def create_report_witness(body: dict, report_id: int) -> PersonalDetails:
    """Witnesses only give a full name and a number."""
    full_name = require_str(body, "full_name", strip=True)
    contact = require_str(body, "contact_number", strip=True)
    if not full_name:
        raise ValidationError("full_name", "must not be empty")
    if not contact:
        raise ValidationError("contact_number", "must not be empty")

    witness = PersonalDetails(
        first_name=full_name,
        last_name=None,
        date_of_birth=None,
        contact_number=contact,
        report_id=report_id,
    )
    return witness.save()


def create_lost_article_personal_details(body: dict, lost_article_id: int) -> PersonalDetails:
    return create(body, lost_article_id=lost_article_id)


def delete_report_witness(report_id, witness_id) -> bool:
    rid, wid = _require_ids("reportId and witnessId must be included", report_id, witness_id)
    return PersonalDetails.delete_where(["id", "report_id"], [wid, rid]) > 0


def delete_lost_article_personal_details(lost_article_id, personal_details_id) -> bool:
    lid, pid = _require_ids(
        "lostArticleId and personalDetailsId must be included",
        lost_article_id, personal_details_id,
    )
    return PersonalDetails.delete_where(["id", "lost_article_id"], [pid, lid]) > 0


def find_by_report_id(report_id: int) -> List[dict]:
    return [d.to_dict() for d in PersonalDetails.find_all_by("report_id", report_id, PersonalDetails.id)]


def find_by_lost_article_id(lost_article_id: int) -> List[dict]:
    return [d.to_dict() for d in PersonalDetails.find_all_by("lost_article_id", lost_article_id, PersonalDetails.id)]
