# models/base.py
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Sequence

from sqlalchemy import select, delete

from db import db


class BaseModel:
    """
    Generic data-access helpers shared by every entity table.

    Mixed into db.Model subclasses:
        class Report(BaseModel, db.Model): ...
    """

    # columns left out of to_dict()
    __hidden__: tuple[str, ...] = ()

    @classmethod
    def find_by_id(cls, id_):
        return db.session.get(cls, id_)

    @classmethod
    def find_by(cls, columns: Sequence[str] | str, values: Sequence[Any] | Any):
        """First row where every column equals its paired value, or None."""
        if isinstance(columns, str):
            columns, values = [columns], [values]
        if len(columns) != len(values):
            raise ValueError("columns and values must be the same length")
        stmt = select(cls).filter_by(**dict(zip(columns, values))).limit(1)
        return db.session.execute(stmt).scalars().first()

    @classmethod
    def find_all_by(cls, column: str, value: Any, order_by=None) -> list:
        stmt = select(cls).filter_by(**{column: value})
        if order_by is not None:
            stmt = stmt.order_by(order_by)
        return list(db.session.execute(stmt).scalars().all())

    @classmethod
    def all(cls, limit: int = 100, order_by=None) -> list:
        stmt = select(cls)
        if order_by is not None:
            stmt = stmt.order_by(order_by)
        return list(db.session.execute(stmt.limit(limit)).scalars().all())

    @classmethod
    def delete_where(cls, columns: Sequence[str] | str, values: Sequence[Any] | Any) -> int:
        """Delete rows matching every column/value pair; returns how many went."""
        if isinstance(columns, str):
            columns, values = [columns], [values]
        if len(columns) != len(values):
            raise ValueError("columns and values must be the same length")
        conds = [getattr(cls, c) == v for c, v in zip(columns, values)]
        result = db.session.execute(delete(cls).where(*conds))
        db.session.commit()
        return int(result.rowcount or 0)

    def save(self, commit: bool = True):
        db.session.add(self)
        if commit:
            db.session.commit()
        else:
            db.session.flush()
        return self

    def to_dict(self) -> dict:
        out = {}
        for col in self.__table__.columns:
            if col.key in self.__hidden__:
                continue
            val = getattr(self, col.key)
            if isinstance(val, (datetime, date)):
                val = val.isoformat()
            out[col.key] = val
        return out
