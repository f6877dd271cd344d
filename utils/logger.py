# utils/logger.py
from __future__ import annotations

import logging
import uuid

from flask import Flask, g, request

from services import monitoring
from utils.pii_scrubber import scrub_pii

__all__ = ["configure_logging", "PiiScrubFilter", "MonitoringHandler"]

IGNORED_LOGGERS = (monitoring.LOGGER_NAME, "urllib3")


class PiiScrubFilter(logging.Filter):
    """Redact PII from the rendered message before any handler sees it."""

    def filter(self, record: logging.LogRecord) -> bool:
        try:
            msg = record.getMessage()
        except (TypeError, ValueError):
            return True
        record.msg = scrub_pii(msg)
        record.args = None
        return True


class MonitoringHandler(logging.Handler):
    """Ship WARNING+ records to the monitoring webhook."""

    def __init__(self, webhook_url: str | None, level=logging.WARNING):
        super().__init__(level)
        self.webhook_url = webhook_url

    def emit(self, record: logging.LogRecord) -> None:
        # the webhook's own diagnostics (and its HTTP stack) must not loop back into it
        if record.name.startswith(IGNORED_LOGGERS):
            return
        try:
            monitoring.emit(
                record.levelname.lower(),
                record.getMessage(),
                {"logger": record.name, "module": record.module},
                webhook_url=self.webhook_url,
            )
        except Exception:
            self.handleError(record)


def configure_logging(app: Flask) -> None:
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    app.logger.setLevel(level)

    scrub = PiiScrubFilter()
    app.logger.addFilter(scrub)

    # module loggers (utils.encryption, google_cloud, client, ...) only reach
    # the root logger, so scrubbing and monitoring hang off its handlers
    root = logging.getLogger()
    for handler in list(root.handlers):
        if isinstance(handler, MonitoringHandler):
            root.removeHandler(handler)
    for handler in app.logger.handlers + root.handlers:
        if not any(isinstance(f, PiiScrubFilter) for f in handler.filters):
            handler.addFilter(scrub)

    if app.config.get("MONITORING_WEBHOOK_URL"):
        monitor = MonitoringHandler(app.config["MONITORING_WEBHOOK_URL"])
        monitor.addFilter(scrub)
        root.addHandler(monitor)

    @app.before_request
    def _log_request():
        g.request_id = str(uuid.uuid4())
        app.logger.info(
            "[http_request] id=%s %s %s device=%s ip=%s",
            g.request_id,
            request.method,
            request.path,
            request.headers.get("User-Agent", "-"),
            request.remote_addr,
        )

    @app.after_request
    def _tag_response(resp):
        rid = getattr(g, "request_id", None)
        if rid:
            resp.headers["X-Request-Id"] = rid
        return resp
