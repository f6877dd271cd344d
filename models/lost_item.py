# models/lost_item.py
from __future__ import annotations
from db import db
from sqlalchemy.sql import func

from models.base import BaseModel

LOST_ITEM_STATUSES = ("PENDING", "INVESTIGATING", "FOUND", "CLOSED")
# Citizens may view anyone's item in these states, but no longer edit their own
RETURNED_STATUSES = ("FOUND", "CLOSED")


class LostItem(BaseModel, db.Model):
    __tablename__ = "lost_items"

    id            = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name          = db.Column(db.String(120), nullable=False)
    description   = db.Column(db.Text, nullable=False)
    serial_number = db.Column(db.String(120), nullable=True)
    color         = db.Column(db.String(60), nullable=True)
    model         = db.Column(db.String(120), nullable=True)
    longitude     = db.Column(db.Float, nullable=False)
    latitude      = db.Column(db.Float, nullable=False)
    status        = db.Column(db.String(16), nullable=False, default="PENDING", index=True)
    branch        = db.Column(db.String(120), nullable=False)
    user_id       = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    created_at    = db.Column(db.DateTime, server_default=func.now(), nullable=False)
    updated_at    = db.Column(db.DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    images = db.relationship(
        "ReportImage",
        primaryjoin="ReportImage.lost_article_id==LostItem.id",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
