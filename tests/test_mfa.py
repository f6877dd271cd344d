from unittest.mock import patch

import jwt
import pytest
from freezegun import freeze_time

from models.user import User
from services import mfa as mfa_service
from utils.http_error import HttpError


@pytest.fixture
def fixed_code():
    with patch("services.mfa.generate_code", return_value="123456"):
        yield "123456"


def _login(client, username, password="Guardian!234"):
    return client.post("/api/v1/auth/login", json={"username": username, "password": password})


# ── service ──────────────────────────────────────────────────────────────

def test_login_requires_mfa_only_with_email(make_user):
    assert mfa_service.does_login_require_mfa(make_user(email="a@example.org"))
    assert not mfa_service.does_login_require_mfa(make_user(email=None))
    assert not mfa_service.does_login_require_mfa(None)


def test_generate_code_is_six_digits():
    for _ in range(20):
        code = mfa_service.generate_code()
        assert len(code) == 6 and code.isdigit()


def test_generate_token_hides_the_code(app, sent_mail, fixed_code):
    token = mfa_service.generate_token(4, "a@example.org")
    payload = mfa_service.verify_token(token)

    assert payload["sub"] == 4
    assert payload["email"] == "a@example.org"
    assert payload["jti"]
    assert payload["code"] != fixed_code
    sent_mail.assert_called_once()
    assert sent_mail.call_args.kwargs["to"] == "a@example.org"
    assert fixed_code in sent_mail.call_args.kwargs["text"]


def test_generate_token_without_email_returns_none(app, sent_mail):
    assert mfa_service.generate_token(4, "") is None
    assert mfa_service.generate_token(None, "a@example.org") is None
    sent_mail.assert_not_called()


def test_generate_token_keeps_an_existing_expiry(app, sent_mail):
    token = mfa_service.generate_token(4, "a@example.org", existing_exp=4102444800)
    assert mfa_service.verify_token(token)["exp"] == 4102444800


def test_resend_is_throttled_per_user(app, sent_mail):
    with freeze_time("2026-05-01 10:00:00") as frozen:
        mfa_service.generate_token(4, "a@example.org")
        with pytest.raises(HttpError) as err:
            mfa_service.generate_token(4, "a@example.org")
        assert err.value.code == 400
        assert err.value.client_message == "Requesting codes too quickly"

        # a different user is unaffected
        assert mfa_service.generate_token(5, "b@example.org")

        frozen.tick(app.config["MFA_RESEND_ALLOW_AFTER_SECONDS"] + 1)
        assert mfa_service.generate_token(4, "a@example.org")


def test_missing_smtp_settings_fail_with_500(app, sent_mail):
    app.config["SMTP_HOST"] = None
    with pytest.raises(HttpError) as err:
        mfa_service.generate_token(4, "a@example.org")
    assert err.value.code == 500
    sent_mail.assert_not_called()


def test_mail_failure_becomes_500(app):
    with patch("services.mfa.send_email", side_effect=RuntimeError("smtp down")):
        with pytest.raises(HttpError) as err:
            mfa_service.generate_token(4, "a@example.org")
    assert err.value.code == 500
    assert err.value.client_message == "Unable to send verification code. Please try again."


def test_verify_code_accepts_the_right_code(app, sent_mail, fixed_code):
    token = mfa_service.generate_token(4, "a@example.org")
    assert mfa_service.verify_code(token, fixed_code)["sub"] == 4


def test_verify_code_rejects_a_wrong_code(app, sent_mail, fixed_code):
    token = mfa_service.generate_token(4, "a@example.org")
    with pytest.raises(HttpError) as err:
        mfa_service.verify_code(token, "654321")
    assert err.value.code == 400
    assert err.value.client_message == "Invalid 2FA Code"


def test_verify_token_rejects_expired_challenge(app, sent_mail):
    with freeze_time("2026-05-01 10:00:00") as frozen:
        token = mfa_service.generate_token(4, "a@example.org")
        frozen.tick(app.config["MFA_ACCESS_TOKEN_WINDOW_SECONDS"] + 1)
        with pytest.raises(jwt.ExpiredSignatureError):
            mfa_service.verify_token(token)


# ── routes ───────────────────────────────────────────────────────────────

def test_login_with_email_returns_mfa_challenge(client, make_user, sent_mail):
    make_user(username="maria", email="maria.lopez@example.org")

    resp = _login(client, "maria")
    body = resp.get_json()

    assert resp.status_code == 200
    assert body["data"]["mfa_required"] is True
    assert body["data"]["mfa_token"]
    assert body["data"]["to"] == "m***@e***.org"
    assert "access-token" not in resp.headers.get("Set-Cookie", "")


def test_verify_code_sets_both_cookies_and_returns_tokens(client, make_user, sent_mail, fixed_code):
    user = make_user(username="maria", email="maria@example.org")
    mfa_token = _login(client, "maria").get_json()["data"]["mfa_token"]

    resp = client.post("/api/v1/mfa/verify-code", json={"mfa_token": mfa_token, "code": fixed_code})
    body = resp.get_json()

    assert resp.status_code == 200
    assert body["data"]["accessToken"]
    assert body["data"]["refreshToken"]
    cookies = resp.headers.getlist("Set-Cookie")
    assert any(c.startswith("access-token=") and "HttpOnly" in c for c in cookies)
    assert any(c.startswith("refresh-token=") and "HttpOnly" in c for c in cookies)

    profile = client.get("/api/v1/auth/profile",
                         headers={"Authorization": f"Bearer {body['data']['accessToken']}"})
    assert profile.status_code == 200
    assert profile.get_json()["data"]["id"] == user.id


def test_verify_code_with_wrong_code_does_not_authenticate(client, make_user, sent_mail, fixed_code):
    make_user(username="maria", email="maria@example.org")
    mfa_token = _login(client, "maria").get_json()["data"]["mfa_token"]

    resp = client.post("/api/v1/mfa/verify-code", json={"mfa_token": mfa_token, "code": "000000"})

    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Invalid 2FA Code"
    assert not resp.headers.getlist("Set-Cookie")


def test_verify_code_with_missing_fields(client):
    resp = client.post("/api/v1/mfa/verify-code", json={"code": "123456"})
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Missing multi-factor authentication details"


def test_verify_code_with_tampered_token(client):
    resp = client.post("/api/v1/mfa/verify-code", json={"mfa_token": "not.a.jwt", "code": "123456"})
    assert resp.status_code == 401


def test_verify_code_for_deleted_user_is_404(app, client, make_user, sent_mail, fixed_code):
    user = make_user(username="maria", email="maria@example.org")
    mfa_token = _login(client, "maria").get_json()["data"]["mfa_token"]
    User.delete_where("id", user.id)

    resp = client.post("/api/v1/mfa/verify-code", json={"mfa_token": mfa_token, "code": fixed_code})
    assert resp.status_code == 404
    assert resp.get_json()["message"] == "User not found"


def test_verify_code_fails_when_tokens_cannot_be_issued(client, make_user, sent_mail, fixed_code):
    make_user(username="maria", email="maria@example.org")
    mfa_token = _login(client, "maria").get_json()["data"]["mfa_token"]

    with patch("services.authentication.generate_tokens", return_value=["only-one"]):
        resp = client.post("/api/v1/mfa/verify-code", json={"mfa_token": mfa_token, "code": fixed_code})

    assert resp.status_code == 500
    assert resp.get_json()["message"] == "Unable to generate authentication tokens"


def test_resend_code_requires_token(client):
    resp = client.post("/api/v1/mfa/resend-code", json={})
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Missing multi-factor authentication token"


def test_resend_code_issues_a_new_token(client, make_user, sent_mail):
    make_user(username="maria", email="maria@example.org")
    with freeze_time("2026-05-01 10:00:00") as frozen:
        mfa_token = _login(client, "maria").get_json()["data"]["mfa_token"]
        frozen.tick(60)
        resp = client.post("/api/v1/mfa/resend-code", json={"mfa_token": mfa_token})

    assert resp.status_code == 200
    new_token = resp.get_json()["data"]["mfa_token"]
    assert new_token and new_token != mfa_token
    assert sent_mail.call_count == 2


def test_resend_code_too_soon_is_rejected(client, make_user, sent_mail):
    make_user(username="maria", email="maria@example.org")
    mfa_token = _login(client, "maria").get_json()["data"]["mfa_token"]

    resp = client.post("/api/v1/mfa/resend-code", json={"mfa_token": mfa_token})
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Requesting codes too quickly"
