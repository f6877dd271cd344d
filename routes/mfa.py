# routes/mfa.py
from __future__ import annotations

from flask import Blueprint, request, current_app

from routes.auth import session_response
from services import authentication as authentication_service
from services import mfa as mfa_service
from utils.http_error import HttpError, http_response

mfa_bp = Blueprint("mfa", __name__, url_prefix="/api/v1/mfa")


@mfa_bp.route("/verify-code", methods=["POST"])
def verify_code():
    """
    Body: { mfa_token, code }
    Completes a pending challenge and starts a session (cookies + JSON).
    """
    data = request.get_json(silent=True) or {}
    mfa_token = data.get("mfa_token")
    code = data.get("code")

    if not mfa_token or not code:
        raise HttpError(code=400, client_message="Missing multi-factor authentication details")

    payload = mfa_service.verify_code(mfa_token, str(code))
    user = authentication_service.mfa_verified(payload["sub"])
    if not user:
        raise HttpError(code=404, client_message="User not found")

    tokens = authentication_service.generate_tokens(user.id, user.is_officer)
    if not tokens or len(tokens) < 2:
        raise HttpError(code=500, client_message="Unable to generate authentication tokens")

    access_token, refresh_token = tokens[0], tokens[1]
    return session_response(access_token, refresh_token)


@mfa_bp.route("/resend-code", methods=["POST"])
def resend_code():
    """Body: { mfa_token } -> { mfa_token: <new token> } with a fresh code mailed."""
    data = request.get_json(silent=True) or {}
    mfa_token = data.get("mfa_token")

    if not mfa_token:
        raise HttpError(code=400, client_message="Missing multi-factor authentication token")

    payload = mfa_service.verify_token(mfa_token)
    new_token = mfa_service.generate_token(payload["sub"], payload.get("email"))
    if not new_token:
        raise HttpError(code=400, client_message="No email address on this challenge")

    current_app.logger.info("[mfa] code resent uid=%s", payload["sub"])
    return http_response(200, {"mfa_token": new_token})
