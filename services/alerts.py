# services/alerts.py
from __future__ import annotations

from typing import List, Optional

from flask import current_app

from models.alert import Alert
from realtime import emit_alert
from utils.pii_scrubber import scrub_pii
from utils.validation import ValidationError, optional_str, require_str

ALERT_TYPES = ("General", "Safety", "Weather", "Traffic", "Missing Person", "Community")


def _validate(body: dict, *, partial: bool = False) -> dict:
    body = body or {}
    out = {}
    for f in ("title", "description"):
        if not partial or body.get(f) is not None:
            val = require_str(body, f, strip=True)
            if not val:
                raise ValidationError(f, "must not be empty")
            out[f] = scrub_pii(val)
    kind = optional_str(body, "type", strip=True)
    if kind:
        out["type"] = kind
    elif not partial:
        out["type"] = "General"
    return out


def serialize(alert: Alert) -> dict:
    data = alert.to_dict()
    data["author"] = alert.author.name if alert.author else None
    return data


def list_alerts(limit: int = 100) -> List[dict]:
    return [serialize(a) for a in Alert.all(limit, Alert.created_at.desc())]


def get_alert(id_) -> Optional[dict]:
    alert = Alert.find_by_id(id_)
    return serialize(alert) if alert else None


def create_alert(body: dict, created_by: int) -> dict:
    alert = Alert(created_by=created_by, **_validate(body)).save()
    payload = serialize(alert)
    emit_alert(payload)
    current_app.logger.info("[alerts] created id=%s type=%s by uid=%s", alert.id, alert.type, created_by)
    return payload


def update_alert(id_, body: dict) -> Optional[dict]:
    alert = Alert.find_by_id(id_)
    if alert is None:
        return None
    for key, val in _validate(body, partial=True).items():
        setattr(alert, key, val)
    alert.save()
    return serialize(alert)


def delete_alert(id_) -> bool:
    return Alert.delete_where("id", id_) > 0
