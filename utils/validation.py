# utils/validation.py
"""
Small request-body validators.

Every helper raises ValidationError (a 400 HttpError) naming the offending
field, so routes and services can parse bodies inline without try/except.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Iterable

from utils.http_error import HttpError

__all__ = [
    "ValidationError",
    "require_str",
    "optional_str",
    "require_float",
    "optional_float",
    "require_enum",
    "require_date",
    "parse_id",
]


class ValidationError(HttpError):
    def __init__(self, field: str, message: str):
        super().__init__(
            code=400,
            client_message=f"{field}: {message}",
            data={"field": field},
        )
        self.field = field


def require_str(data: dict, field: str, *, strip: bool = False) -> str:
    val = (data or {}).get(field)
    if not isinstance(val, str):
        raise ValidationError(field, "expected a string")
    return val.strip() if strip else val


def optional_str(data: dict, field: str, *, strip: bool = False) -> str | None:
    if (data or {}).get(field) is None:
        return None
    return require_str(data, field, strip=strip)


def require_float(data: dict, field: str) -> float:
    val = (data or {}).get(field)
    # Multipart bodies deliver numbers as strings
    if isinstance(val, bool) or val is None or val == "":
        raise ValidationError(field, "expected a number")
    try:
        return float(val)
    except (TypeError, ValueError):
        raise ValidationError(field, "expected a number")


def optional_float(data: dict, field: str) -> float | None:
    val = (data or {}).get(field)
    if val is None or val == "":
        return None
    return require_float(data, field)


def require_enum(value: Any, allowed: Iterable[str], field: str = "status") -> str:
    allowed = tuple(allowed)
    if not isinstance(value, str) or value not in allowed:
        raise ValidationError(field, f"expected one of {', '.join(allowed)}")
    return value


def require_date(data: dict, field: str) -> date:
    """ISO calendar date only (YYYY-MM-DD)."""
    val = require_str(data, field, strip=True)
    try:
        return datetime.strptime(val, "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(field, "expected a date in YYYY-MM-DD format")


def parse_id(value: Any, field: str = "id") -> int:
    if isinstance(value, bool):
        raise ValidationError(field, "expected a numeric id")
    try:
        n = int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(field, "expected a numeric id")
    if n <= 0:
        raise ValidationError(field, "expected a numeric id")
    return n
