# backend/app.py
from __future__ import annotations

import os

import click
import jwt
from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException
from werkzeug.middleware.proxy_fix import ProxyFix
from flask_cors import CORS
from sqlalchemy import event

from config import Config, DevelopmentConfig
from db import db, migrate
from google_cloud import configure_google_cloud_credentials
from realtime import socketio
from utils.http_error import HttpError
from utils.logger import configure_logging

# Ensure models are imported so Flask-Migrate sees them
from models.user import User
from models.report import Report, ReportImage
from models.lost_item import LostItem
from models.personal_details import PersonalDetails
from models.note import Note
from models.alert import Alert
from models.audit_log import AuditLog

# Blueprints
from routes.auth import auth_bp
from routes.mfa import mfa_bp
from routes.files import files_bp
from routes.reports import reports_bp
from routes.lost_articles import lost_articles_bp
from routes.alerts import alerts_bp
from routes.notes import notes_bp


def create_app(config_object=None) -> Flask:
    app = Flask(__name__)

    # Respect reverse proxy headers (scheme / host) for correct URL generation
    app.wsgi_app = ProxyFix(app.wsgi_app, x_proto=1, x_host=1)  # type: ignore[arg-type]
    app.config["PREFERRED_URL_SCHEME"] = "https"

    # Load config + init extensions
    app.config.from_object(config_object or Config)

    origins = app.config.get("CORS_ORIGINS") or "*"
    if origins != "*":
        origins = [o.strip() for o in origins.split(",") if o.strip()]
    CORS(app, resources={r"/api/*": {"origins": origins}}, supports_credentials=origins != "*")

    configure_logging(app)
    configure_google_cloud_credentials()

    db.init_app(app)
    migrate.init_app(app, db)
    socketio.init_app(app, cors_allowed_origins=origins)

    os.makedirs(app.config["UPLOAD_DIR"], exist_ok=True)
    uri = app.config["SQLALCHEMY_DATABASE_URI"]
    if uri.startswith("sqlite:///") and ":memory:" not in uri:
        os.makedirs(os.path.dirname(uri[len("sqlite:///"):]) or ".", exist_ok=True)

    with app.app_context():
        # SQLite ignores foreign keys (and ON DELETE CASCADE) unless asked
        if db.engine.dialect.name == "sqlite":
            @event.listens_for(db.engine, "connect")
            def _sqlite_foreign_keys(dbapi_conn, _):
                cur = dbapi_conn.cursor()
                try:
                    cur.execute("PRAGMA foreign_keys=ON")
                finally:
                    cur.close()

        # Touch models so Alembic/Flask-Migrate registers them
        _ = (User, Report, ReportImage, LostItem, PersonalDetails, Note, Alert, AuditLog)

        db.create_all()

    # Health check
    @app.route("/")
    def health_check():
        return jsonify(status="ok", name=app.config.get("APP_NAME")), 200

    # ── Error handling ─────────────────────────────────────────────────────
    @app.errorhandler(HttpError)
    def handle_http_error(e: HttpError):
        e.path = e.path or request.path
        e.log()
        return e.to_response()

    @app.errorhandler(jwt.ExpiredSignatureError)
    def handle_expired_token(e):
        app.logger.info("[http] 401 expired token path=%s", request.path)
        return HttpError(code=401, client_message="Token has expired").to_response()

    @app.errorhandler(jwt.InvalidTokenError)
    def handle_invalid_token(e):
        app.logger.info("[http] 401 invalid token path=%s err=%s", request.path, e)
        return HttpError(code=401, client_message="Invalid token").to_response()

    @app.errorhandler(HTTPException)
    def handle_http_exception(e: HTTPException):
        return HttpError(code=e.code or 500, client_message=e.description or "").to_response()

    # Global error handler
    @app.errorhandler(Exception)
    def handle_any_error(e: Exception):
        app.logger.exception("[http] unhandled error path=%s", request.path)
        db.session.rollback()
        return HttpError(code=500).to_response()

    # Register blueprints
    app.register_blueprint(auth_bp)
    app.register_blueprint(mfa_bp)
    app.register_blueprint(files_bp)
    app.register_blueprint(reports_bp)
    app.register_blueprint(lost_articles_bp)
    app.register_blueprint(alerts_bp)
    app.register_blueprint(notes_bp)

    # CLI: rebuild the schema with example rows
    @app.cli.command("seed-example-data")
    def seed_example_data_cmd():
        from seed import seed_example_data

        failures = seed_example_data()
        if failures:
            for table, count in sorted(failures.items()):
                click.echo(f"{table}: {count} failed")
        click.echo("Example data created.")

    return app


# Optional local entrypoint (useful for quick dev runs)
if __name__ == "__main__":
    app = create_app(DevelopmentConfig)
    # Socket.IO server (falls back to Werkzeug in dev)
    socketio.run(
        app,
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", "5000")),
        allow_unsafe_werkzeug=True,  # dev convenience
        debug=bool(os.environ.get("FLASK_DEBUG", "")),
    )
