# models/user.py
from __future__ import annotations
from db import db
from sqlalchemy.sql import func
from werkzeug.security import generate_password_hash, check_password_hash

from models.base import BaseModel


class User(BaseModel, db.Model):
    __tablename__ = "users"
    __hidden__ = ("password_hash",)

    id            = db.Column(db.Integer, primary_key=True, autoincrement=True)
    username      = db.Column(db.String(80), nullable=False, unique=True, index=True)
    email         = db.Column(db.String(254), nullable=True, index=True)
    first_name    = db.Column(db.String(80), nullable=True)
    last_name     = db.Column(db.String(80), nullable=True)
    password_hash = db.Column(db.String(255), nullable=False)
    is_officer    = db.Column(db.Boolean, nullable=False, default=False, index=True)

    created_at    = db.Column(db.DateTime, server_default=func.now(), nullable=False)
    updated_at    = db.Column(db.DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    # ── Helpers ─────────────────────────────────────────────────────────────
    def set_password(self, raw: str) -> None:
        self.password_hash = generate_password_hash(raw)

    def check_password(self, raw: str) -> bool:
        try:
            return check_password_hash(self.password_hash or "", raw or "")
        except (TypeError, ValueError):
            return False

    @property
    def name(self) -> str:
        fn = (self.first_name or "").strip()
        ln = (self.last_name or "").strip()
        return (fn + " " + ln).strip() or (self.username or f"User #{self.id}")

    def to_profile(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "is_officer": bool(self.is_officer),
        }
