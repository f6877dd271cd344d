# auth_guard.py
from __future__ import annotations

from functools import wraps

import jwt
from flask import request, g, current_app

from config import ACCESS_TOKEN_COOKIE_NAME
from db import db
from models.user import User
from services.authentication import verify_access_token
from utils.http_error import HttpError

__all__ = ["require_auth", "bearer_token"]


def bearer_token() -> str | None:
    """Access token from `Authorization: Bearer ...`, falling back to the cookie."""
    auth = request.headers.get("Authorization", "")
    if auth.startswith("Bearer "):
        return auth.split(" ", 1)[1].strip() or None
    return request.cookies.get(ACCESS_TOKEN_COOKIE_NAME) or None


def require_auth(officer: bool = False):
    """
    Usage:
      @require_auth()              -> any authenticated user
      @require_auth(officer=True)  -> officers only
    Sets g.user and g.officer for the handler.
    """

    def decorator(f):
        @wraps(f)
        def wrapped(*args, **kwargs):
            token = bearer_token()
            if not token:
                return HttpError(code=401, client_message="Missing token").to_response()

            try:
                payload = verify_access_token(token)
            except jwt.ExpiredSignatureError:
                return HttpError(code=401, client_message="Token has expired").to_response()
            except jwt.InvalidTokenError:
                return HttpError(code=401, client_message="Invalid token").to_response()

            user = db.session.get(User, payload["sub"])
            if not user:
                return HttpError(code=401, client_message="User not found").to_response()

            g.user = user
            g.officer = bool(user.is_officer)

            current_app.logger.info(
                "[guard] %s %s uid=%s officer=%s ip=%s",
                request.method, request.path, user.id, g.officer, request.remote_addr,
            )

            if officer and not g.officer:
                return HttpError(code=403, client_message="Insufficient permissions").to_response()

            return f(*args, **kwargs)

        return wrapped

    return decorator
