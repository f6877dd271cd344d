# models/report.py
from __future__ import annotations
from db import db
from sqlalchemy.sql import func

from models.base import BaseModel

REPORT_STATUSES = ("PENDING", "IN-PROGRESS", "COMPLETED", "CLOSED")


class Report(BaseModel, db.Model):
    __tablename__ = "reports"

    id          = db.Column(db.Integer, primary_key=True, autoincrement=True)
    description = db.Column(db.Text, nullable=False)
    longitude   = db.Column(db.Float, nullable=True)
    latitude    = db.Column(db.Float, nullable=True)
    status      = db.Column(db.String(16), nullable=False, default="PENDING", index=True)
    priority    = db.Column(db.Integer, nullable=False, default=0, index=True)
    user_id     = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    created_at  = db.Column(db.DateTime, server_default=func.now(), nullable=False)
    updated_at  = db.Column(db.DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    author = db.relationship("User", lazy="joined")
    images = db.relationship(
        "ReportImage",
        backref="report",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class ReportImage(BaseModel, db.Model):
    """Image attached to a report or a lost article (exactly one of the two)."""
    __tablename__ = "report_images"

    id              = db.Column(db.Integer, primary_key=True, autoincrement=True)
    report_id       = db.Column(db.Integer, db.ForeignKey("reports.id", ondelete="CASCADE"), nullable=True, index=True)
    lost_article_id = db.Column(db.Integer, db.ForeignKey("lost_items.id", ondelete="CASCADE"), nullable=True, index=True)
    image_path      = db.Column(db.String(512), nullable=False)
    created_at      = db.Column(db.DateTime, server_default=func.now(), nullable=False)
