# backend/routes/auth.py
from __future__ import annotations

import time

import jwt
from flask import Blueprint, request, jsonify, g, current_app

from auth_guard import require_auth, bearer_token
from config import ACCESS_TOKEN_COOKIE_NAME, REFRESH_TOKEN_COOKIE_NAME, cookie_options
from services import authentication as authentication_service
from utils.http_error import HttpError, http_response

__all__ = ["auth_bp", "session_response"]
auth_bp = Blueprint("auth", __name__, url_prefix="/api/v1/auth")


def session_response(access_token: str, refresh_token: str, code: int = 200, **extra):
    """Deliver both tokens as cookies and in the JSON body."""
    resp, code = http_response(code, {"accessToken": access_token, "refreshToken": refresh_token, **extra})
    opts = cookie_options(current_app.config)
    resp.set_cookie(ACCESS_TOKEN_COOKIE_NAME, access_token,
                    max_age=current_app.config["ACCESS_TOKEN_TTL_SECONDS"], **opts)
    resp.set_cookie(REFRESH_TOKEN_COOKIE_NAME, refresh_token,
                    max_age=current_app.config["REFRESH_TOKEN_TTL_SECONDS"], **opts)
    return resp, code


# -------------------------------------------------------------------
# Middleware
# -------------------------------------------------------------------
@auth_bp.after_request
def add_no_store(resp):
    resp.headers["Cache-Control"] = "no-store"
    return resp


@auth_bp.route("/ping", methods=["GET"])
def ping():
    return jsonify(ok=True, ts=time.time()), 200


@auth_bp.route("/register", methods=["POST"])
def register():
    data = request.get_json(silent=True) or {}
    user = authentication_service.register(data)
    current_app.logger.info("[auth] registered uid=%s", user.id)
    return http_response(201, user.to_profile())


@auth_bp.route("/login", methods=["POST"])
def login():
    """
    Sign in. Accounts with an email get an MFA challenge instead of tokens:
      -> {mfa_required: true, mfa_token, to}
    and finish through /api/v1/mfa/verify-code.
    """
    data = request.get_json(silent=True) or {}
    username = data.get("username")
    password = data.get("password")
    if not username or not password:
        raise HttpError(code=400, client_message="Missing username or password")

    result = authentication_service.login(username, password)
    if result["mfa_required"]:
        return http_response(200, {
            "mfa_required": True,
            "mfa_token": result["mfa_token"],
            "to": result["to"],
        })

    access, refresh = result["tokens"]
    return session_response(access, refresh, mfa_required=False)


@auth_bp.route("/refresh", methods=["POST"])
def refresh():
    token = (
        request.headers.get("refresh-token")
        or request.cookies.get(REFRESH_TOKEN_COOKIE_NAME)
        or (request.get_json(silent=True) or {}).get("refreshToken")
    )
    if not token:
        raise HttpError(code=401, client_message="Missing refresh token")

    user, tokens = authentication_service.refresh(token)
    current_app.logger.info("[auth] refreshed uid=%s", user.id)
    return session_response(*tokens)


@auth_bp.route("/is-authed", methods=["GET"])
def is_authed():
    token = bearer_token()
    if not token:
        return http_response(200, {"authenticated": False, "is_officer": False})
    try:
        payload = authentication_service.verify_access_token(token)
    except jwt.InvalidTokenError:
        return http_response(200, {"authenticated": False, "is_officer": False})
    return http_response(200, {"authenticated": True, "is_officer": bool(payload.get("officer"))})


@auth_bp.route("/profile", methods=["GET"])
@require_auth()
def profile():
    return http_response(200, g.user.to_profile())


@auth_bp.route("/logout", methods=["POST"])
def logout():
    resp, code = http_response(200, {"loggedOut": True})
    opts = cookie_options(current_app.config)
    resp.delete_cookie(ACCESS_TOKEN_COOKIE_NAME, httponly=opts["httponly"],
                       secure=opts["secure"], samesite=opts["samesite"])
    resp.delete_cookie(REFRESH_TOKEN_COOKIE_NAME, httponly=opts["httponly"],
                       secure=opts["secure"], samesite=opts["samesite"])
    return resp, code
