from db import db
from sqlalchemy.sql import func

from models.base import BaseModel


class Alert(BaseModel, db.Model):
    __tablename__ = 'alerts'

    id          = db.Column(db.Integer, primary_key=True, autoincrement=True)
    title       = db.Column(db.String(160), nullable=False)
    description = db.Column(db.Text, nullable=False)
    type        = db.Column(db.String(40), nullable=False, default='General')
    created_by  = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='SET NULL'), nullable=True, index=True)
    created_at  = db.Column(db.DateTime, server_default=func.now(), nullable=False, index=True)
    updated_at  = db.Column(db.DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    author = db.relationship('User', lazy='joined')
