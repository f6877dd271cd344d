# backend/config.py
import os

def _to_bool(val: str | None, default: bool = False) -> bool:
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "on"}

def _to_int(val: str | None, default: int) -> int:
    try:
        return int(val) if val is not None else default
    except ValueError:
        return default


ACCESS_TOKEN_COOKIE_NAME = "access-token"
REFRESH_TOKEN_COOKIE_NAME = "refresh-token"


class Config:
    # ── Core ─────────────────────────────────────────────────────────────────
    DEBUG = _to_bool(os.environ.get("DEBUG") or os.environ.get("FLASK_DEBUG"), False)
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev_secret")  # ← override in prod!
    APP_NAME = os.environ.get("APP_NAME", "Guardian")
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")

    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL",
        "sqlite:///" + os.path.join(os.getcwd(), "data", "main.db"),
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}

    # ── Auth / JWT ──────────────────────────────────────────────────────────
    JWT_ACCESS_SECRET  = os.environ.get("JWT_ACCESS_SECRET", "dev-access-secret-change-me")
    JWT_REFRESH_SECRET = os.environ.get("JWT_REFRESH_SECRET", "dev-refresh-secret-change-me")
    JWT_MFA_SECRET     = os.environ.get("JWT_MFA_SECRET", "dev-mfa-secret-change-me")
    JWT_FILES_SECRET   = os.environ.get("JWT_FILES_SECRET", "dev-files-secret-change-me")

    ACCESS_TOKEN_TTL_SECONDS  = _to_int(os.environ.get("ACCESS_TOKEN_TTL_SECONDS"), 15 * 60)
    REFRESH_TOKEN_TTL_SECONDS = _to_int(os.environ.get("REFRESH_TOKEN_TTL_SECONDS"), 7 * 24 * 3600)
    FILE_TOKEN_TTL_SECONDS    = _to_int(os.environ.get("FILE_TOKEN_TTL_SECONDS"), 10 * 60)

    # ── MFA ─────────────────────────────────────────────────────────────────
    MFA_ACCESS_TOKEN_WINDOW_SECONDS = _to_int(os.environ.get("MFA_ACCESS_TOKEN_WINDOW_SECONDS"), 10 * 60)
    MFA_RESEND_ALLOW_AFTER_SECONDS  = _to_int(os.environ.get("MFA_RESEND_ALLOW_AFTER_SECONDS"), 30)

    # ── Cookies ─────────────────────────────────────────────────────────────
    COOKIE_SECURE   = _to_bool(os.environ.get("COOKIE_SECURE"), True)
    COOKIE_SAMESITE = os.environ.get("COOKIE_SAMESITE", "Strict")

    # ── Uploads ─────────────────────────────────────────────────────────────
    UPLOAD_DIR = os.environ.get("UPLOAD_DIR", os.path.join(os.getcwd(), "uploads"))
    MAX_CONTENT_LENGTH = _to_int(os.environ.get("MAX_UPLOAD_BYTES"), 10 * 1024 * 1024)

    # ── Mail (SMTP) ─────────────────────────────────────────────────────────
    SMTP_HOST = os.environ.get("SMTP_HOST")
    SMTP_PORT = os.environ.get("SMTP_PORT")
    SMTP_USER = os.environ.get("SMTP_USER")
    SMTP_PASS = os.environ.get("SMTP_PASS")
    MAIL_FROM = os.environ.get("MAIL_FROM", "Guardian <no-reply@guardian.local>")

    # ── Data protection / monitoring ────────────────────────────────────────
    DATA_ENCRYPTION_KEY    = os.environ.get("DATA_ENCRYPTION_KEY")
    MONITORING_WEBHOOK_URL = os.environ.get("MONITORING_WEBHOOK_URL")


class ProductionConfig(Config):
    DEBUG = False
    SECRET_KEY = os.environ.get("SECRET_KEY")


class DevelopmentConfig(Config):
    DEBUG = True
    COOKIE_SECURE = False


class TestingConfig(Config):
    DEBUG = True
    TESTING = True
    SQLALCHEMY_DATABASE_URI = os.environ.get("TEST_DATABASE_URL", "sqlite:///:memory:")
    SQLALCHEMY_ENGINE_OPTIONS = {}
    COOKIE_SECURE = False
    MONITORING_WEBHOOK_URL = None
    SMTP_HOST = "smtp.test.local"
    SMTP_PORT = "587"
    SMTP_USER = "guardian"
    SMTP_PASS = "guardian"


def cookie_options(app_config) -> dict:
    """Shared options for the access/refresh cookies."""
    return {
        "httponly": True,
        "secure": bool(app_config.get("COOKIE_SECURE", True)),
        "samesite": app_config.get("COOKIE_SAMESITE", "Strict"),
    }
