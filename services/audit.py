# services/audit.py
from __future__ import annotations

import json
from typing import Any, Optional

from flask import current_app

from models.audit_log import AuditLog

__all__ = ["record", "record_file_event", "record_incident_event"]


def record(
    *,
    actor_id: Optional[int] = None,
    target_type: str,
    target_id: Any = None,
    action: str,
    metadata: Optional[dict] = None,
    commit: bool = True,
) -> AuditLog:
    log = AuditLog(
        actor_id=actor_id,
        target_type=target_type,
        target_id=None if target_id is None else str(target_id),
        action=action,
        metadata_=json.dumps(metadata) if metadata else None,
    )
    log.save(commit=commit)
    current_app.logger.info(
        "[audit_event] actor=%s target=%s:%s action=%s",
        actor_id, target_type, target_id, action,
    )
    return log


def record_file_event(*, actor_id: Optional[int] = None, action: str, file_path: str,
                      metadata: Optional[dict] = None, commit: bool = True) -> AuditLog:
    return record(
        actor_id=actor_id,
        target_type="file",
        target_id=file_path,
        action=action,
        metadata=metadata,
        commit=commit,
    )


def record_incident_event(*, actor_id: Optional[int] = None, incident_id: Any, action: str,
                          metadata: Optional[dict] = None, commit: bool = True) -> AuditLog:
    return record(
        actor_id=actor_id,
        target_type="incident",
        target_id=incident_id,
        action=action,
        metadata=metadata,
        commit=commit,
    )
