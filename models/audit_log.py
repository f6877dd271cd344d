# models/audit_log.py
from __future__ import annotations
from db import db
from sqlalchemy.sql import func

from models.base import BaseModel
from utils.encryption import EncryptedText


class AuditLog(BaseModel, db.Model):
    __tablename__ = "audit_logs"

    id          = db.Column(db.Integer, primary_key=True, autoincrement=True)
    actor_id    = db.Column(db.Integer, nullable=True, index=True)
    target_type = db.Column(db.String(32), nullable=False)      # 'file' | 'incident' | ...
    target_id   = db.Column(db.String(512), nullable=True)
    action      = db.Column(db.String(32), nullable=False)
    metadata_   = db.Column("metadata", EncryptedText, nullable=True)  # JSON text
    created_at  = db.Column(db.DateTime, server_default=func.now(), nullable=False)
