# models/note.py
from __future__ import annotations
from db import db
from sqlalchemy.sql import func

from models.base import BaseModel

NOTE_RESOURCE_TYPES = ("report", "lost_article")


class Note(BaseModel, db.Model):
    __tablename__ = "notes"

    id            = db.Column(db.Integer, primary_key=True, autoincrement=True)
    resource_type = db.Column(db.String(16), nullable=False, default="report")
    resource_id   = db.Column(db.Integer, nullable=False)
    subject       = db.Column(db.String(160), nullable=True)
    content       = db.Column(db.Text, nullable=False)
    user_id       = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    created_at    = db.Column(db.DateTime, server_default=func.now(), nullable=False, index=True)

    __table_args__ = (
        db.Index("ix_notes_resource", "resource_type", "resource_id"),
    )
