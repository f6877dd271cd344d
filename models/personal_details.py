# models/personal_details.py
from __future__ import annotations
from db import db
from sqlalchemy.sql import func

from models.base import BaseModel
from utils.encryption import EncryptedText


class PersonalDetails(BaseModel, db.Model):
    """A witness on a report, or the owner/claimant of a lost article."""
    __tablename__ = "personal_details"

    id              = db.Column(db.Integer, primary_key=True, autoincrement=True)
    first_name      = db.Column(db.String(120), nullable=False)
    last_name       = db.Column(db.String(120), nullable=True)
    date_of_birth   = db.Column(EncryptedText, nullable=True)   # ISO date, encrypted at rest
    contact_number  = db.Column(EncryptedText, nullable=True)
    report_id       = db.Column(db.Integer, db.ForeignKey("reports.id", ondelete="CASCADE"), nullable=True, index=True)
    lost_article_id = db.Column(db.Integer, db.ForeignKey("lost_items.id", ondelete="CASCADE"), nullable=True, index=True)
    created_at      = db.Column(db.DateTime, server_default=func.now(), nullable=False)
