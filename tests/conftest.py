import pytest
from unittest.mock import patch

from app import create_app
from config import TestingConfig
from db import db
from models.user import User
from services import authentication as authentication_service
from services import mfa as mfa_service


@pytest.fixture
def app(tmp_path):
    class _Config(TestingConfig):
        UPLOAD_DIR = str(tmp_path / "uploads")

    app = create_app(_Config)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture(autouse=True)
def _reset_mfa_throttle():
    mfa_service.reset_throttle()
    yield
    mfa_service.reset_throttle()


@pytest.fixture
def sent_mail():
    """Captures outgoing MFA mail instead of talking to SMTP."""
    with patch("services.mfa.send_email") as send:
        yield send


@pytest.fixture
def make_user(app):
    counter = {"n": 0}

    def _make(username=None, password="Guardian!234", email=None, is_officer=False, **extra):
        counter["n"] += 1
        user = User(
            username=username or f"user{counter['n']}",
            email=email,
            is_officer=is_officer,
            first_name=extra.get("first_name", "Test"),
            last_name=extra.get("last_name", "User"),
        )
        user.set_password(password)
        return user.save()

    return _make


@pytest.fixture
def auth_headers(app):
    def _headers(user):
        access, _ = authentication_service.generate_tokens(user.id, user.is_officer)
        return {"Authorization": f"Bearer {access}"}

    return _headers


@pytest.fixture
def citizen(make_user):
    return make_user(username="citizen")


@pytest.fixture
def officer(make_user):
    return make_user(username="officer", is_officer=True)
