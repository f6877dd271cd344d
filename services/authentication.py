# services/authentication.py
from __future__ import annotations

import re
import time
import uuid
from typing import List, Optional

import jwt
from flask import current_app
from sqlalchemy import or_

from db import db
from models.user import User
from services import mfa
from utils.http_error import HttpError
from utils.mail import mask_email
from utils.validation import ValidationError, optional_str, require_str

__all__ = [
    "register",
    "login",
    "generate_tokens",
    "verify_access_token",
    "refresh",
    "mfa_verified",
]

ALGORITHM = "HS256"
EMAIL_RE = re.compile(r"[^@\s]+@[^@\s]+\.[^@\s]+")
MIN_PASSWORD_LEN = 8


def _encode(user_id: int, is_officer: bool, kind: str, secret: str, ttl: int) -> str:
    return jwt.encode(
        {
            "sub": str(user_id),
            "officer": bool(is_officer),
            "type": kind,
            "jti": uuid.uuid4().hex,
            "exp": int(time.time()) + int(ttl),
        },
        secret,
        algorithm=ALGORITHM,
    )


def _decode(token: str, secret: str, kind: str) -> dict:
    payload = jwt.decode(token, secret, algorithms=[ALGORITHM], options={"require": ["sub", "exp"]})
    if payload.get("type") != kind:
        raise jwt.InvalidTokenError(f"not a {kind} token")
    try:
        payload["sub"] = int(payload["sub"])
    except (TypeError, ValueError):
        raise jwt.InvalidTokenError("token subject is not a user id")
    return payload


def generate_tokens(user_id: int, is_officer: bool) -> List[str]:
    """[access_token, refresh_token]"""
    cfg = current_app.config
    return [
        _encode(user_id, is_officer, "access", cfg["JWT_ACCESS_SECRET"], cfg["ACCESS_TOKEN_TTL_SECONDS"]),
        _encode(user_id, is_officer, "refresh", cfg["JWT_REFRESH_SECRET"], cfg["REFRESH_TOKEN_TTL_SECONDS"]),
    ]


def verify_access_token(token: str) -> dict:
    return _decode(token, current_app.config["JWT_ACCESS_SECRET"], "access")


def verify_refresh_token(token: str) -> dict:
    return _decode(token, current_app.config["JWT_REFRESH_SECRET"], "refresh")


def register(body: dict) -> User:
    username = require_str(body, "username", strip=True)
    password = require_str(body, "password")
    email = (optional_str(body, "email", strip=True) or "").lower() or None
    first_name = optional_str(body, "first_name", strip=True)
    last_name = optional_str(body, "last_name", strip=True)

    if not username:
        raise ValidationError("username", "must not be empty")
    if len(password) < MIN_PASSWORD_LEN:
        raise ValidationError("password", f"must be at least {MIN_PASSWORD_LEN} characters")
    if email and not EMAIL_RE.fullmatch(email):
        raise ValidationError("email", "invalid email address")

    cond = User.username == username
    if email:
        cond = or_(cond, User.email == email)
    if User.query.filter(cond).first():
        raise HttpError(code=409, client_message="Username or email already exists")

    user = User(
        username=username,
        email=email,
        first_name=first_name,
        last_name=last_name,
        is_officer=False,
    )
    user.set_password(password)
    return user.save()


def login(username: str, password: str) -> dict:
    """
    Check credentials. Returns either
      {"mfa_required": True, "mfa_token": ..., "to": <masked email>}
    or
      {"mfa_required": False, "user": User, "tokens": [access, refresh]}
    """
    user = User.query.filter_by(username=(username or "").strip()).first()
    if not (user and user.check_password(password)):
        raise HttpError(code=401, client_message="Invalid username or password")

    if mfa.does_login_require_mfa(user):
        token = mfa.generate_token(user.id, user.email)
        if token:
            current_app.logger.info("[auth] mfa challenge issued uid=%s", user.id)
            return {"mfa_required": True, "mfa_token": token, "to": mask_email(user.email)}

    current_app.logger.info("[auth] login uid=%s officer=%s", user.id, bool(user.is_officer))
    return {"mfa_required": False, "user": user, "tokens": generate_tokens(user.id, user.is_officer)}


def refresh(refresh_token: str) -> tuple[User, List[str]]:
    payload = verify_refresh_token(refresh_token)
    user = db.session.get(User, payload["sub"])
    if user is None:
        raise HttpError(code=401, client_message="User no longer exists")
    return user, generate_tokens(user.id, user.is_officer)


def mfa_verified(user_id: int) -> Optional[User]:
    """The user behind a completed challenge, or None if they have gone."""
    user = db.session.get(User, user_id)
    if user is not None:
        current_app.logger.info("[auth] mfa verified uid=%s", user.id)
    return user
