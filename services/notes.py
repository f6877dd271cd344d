# services/notes.py
from __future__ import annotations

from typing import List

from sqlalchemy import select

from db import db
from models.note import NOTE_RESOURCE_TYPES, Note
from utils.pii_scrubber import scrub_pii
from utils.validation import ValidationError, optional_str, require_enum, require_str


def list_for_resource(resource_id: int, resource_type: str = "report") -> List[dict]:
    resource_type = require_enum(resource_type, NOTE_RESOURCE_TYPES, "type")
    rows = db.session.execute(
        select(Note)
        .filter_by(resource_type=resource_type, resource_id=resource_id)
        .order_by(Note.created_at.desc(), Note.id.desc())
    ).scalars().all()
    return [n.to_dict() for n in rows]


def create_for_resource(resource_id: int, body: dict, user_id: int, resource_type: str = "report") -> dict:
    resource_type = require_enum(resource_type, NOTE_RESOURCE_TYPES, "type")
    content = require_str(body, "content", strip=True)
    if not content:
        raise ValidationError("content", "must not be empty")
    subject = optional_str(body, "subject", strip=True)

    note = Note(
        resource_type=resource_type,
        resource_id=resource_id,
        subject=scrub_pii(subject) if subject else None,
        content=scrub_pii(content),
        user_id=user_id,
    )
    return note.save().to_dict()
