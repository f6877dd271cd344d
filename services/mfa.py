# services/mfa.py
"""
Email second factor.

A pending challenge lives entirely inside a signed JWT (JWT_MFA_SECRET):
    {"sub": "<user id>", "email": ..., "exp": ..., "jti": <uuid>, "code": <salted hash>}
Nothing is stored server-side. A resend mints a fresh token; the old one is
left to expire on its own.
"""
from __future__ import annotations

import secrets
import time
import uuid
from typing import Dict, Optional

import jwt
from flask import current_app
from werkzeug.security import check_password_hash, generate_password_hash

from utils.http_error import HttpError
from utils.mail import missing_smtp_settings, send_email

__all__ = [
    "does_login_require_mfa",
    "generate_code",
    "generate_token",
    "verify_token",
    "verify_code",
]

ALGORITHM = "HS256"

# user id -> unix seconds of the last code we mailed (per process)
_last_sent: Dict[int, float] = {}


def _secret() -> str:
    return current_app.config["JWT_MFA_SECRET"]


def does_login_require_mfa(user) -> bool:
    if user is None:
        return False
    email = (getattr(user, "email", None) or "").strip()
    return bool(email)


def generate_code() -> str:
    return str(100000 + secrets.randbelow(900000))


def _send_code(email: str, code: str) -> None:
    window_min = max(1, int(current_app.config["MFA_ACCESS_TOKEN_WINDOW_SECONDS"]) // 60)
    html = f"""
      <div style="font-family:system-ui,Segoe UI,Roboto,Arial">
        <h2>Guardian sign-in</h2>
        <p>Your verification code is:</p>
        <div style="font-size:24px;font-weight:700;letter-spacing:3px">{code}</div>
        <p>This code expires in {window_min} minutes.</p>
      </div>
    """
    send_email(to=email, subject="Guardian 2FA Code", html=html, text=f"Your Guardian code is {code}")


def generate_token(user_id: int, email: str, existing_exp: Optional[int] = None) -> Optional[str]:
    """
    Mint a challenge token and mail its code to `email`.
    Returns None when there is nobody to send to.
    """
    if not user_id or not email or not str(email).strip():
        return None

    cfg = current_app.config
    now = time.time()
    last = _last_sent.get(int(user_id))
    if last is not None and now < last + int(cfg["MFA_RESEND_ALLOW_AFTER_SECONDS"]):
        raise HttpError(code=400, client_message="Requesting codes too quickly")

    missing = missing_smtp_settings()
    if missing:
        msg = "MFA email transport is not configured; please set SMTP_* env vars"
        current_app.logger.warning("[mfa] %s. Missing: %s", msg, ", ".join(missing))
        raise HttpError(code=500, client_message=msg)

    exp = existing_exp or int(now) + int(cfg["MFA_ACCESS_TOKEN_WINDOW_SECONDS"])
    code = generate_code()
    token = jwt.encode(
        {
            "sub": str(user_id),
            "jti": str(uuid.uuid4()),
            "exp": int(exp),
            "code": generate_password_hash(code),
            "email": email,
        },
        _secret(),
        algorithm=ALGORITHM,
    )

    try:
        _send_code(email, code)
    except RuntimeError as e:
        current_app.logger.exception("[mfa] failed to send code to user=%s", user_id)
        raise HttpError(code=500, client_message="Unable to send verification code. Please try again.", err=e)

    _last_sent[int(user_id)] = now
    return token


def verify_token(token: str) -> dict:
    """Decode a challenge token. Raises jwt.ExpiredSignatureError / jwt.InvalidTokenError."""
    payload = jwt.decode(
        token,
        _secret(),
        algorithms=[ALGORITHM],
        options={"require": ["sub", "exp", "code"]},
    )
    try:
        payload["sub"] = int(payload["sub"])
    except (TypeError, ValueError):
        raise jwt.InvalidTokenError("MFA token subject is not a user id")
    return payload


def verify_code(token: str, code: str) -> dict:
    payload = verify_token(token)
    if not check_password_hash(payload["code"], str(code).strip()):
        raise HttpError(code=400, client_message="Invalid 2FA Code")
    return payload


def reset_throttle() -> None:
    _last_sent.clear()
