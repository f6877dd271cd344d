# services/monitoring.py
"""
Forward warnings/errors to an external monitoring webhook.

Best-effort only: every failure is swallowed after a local log line so the
request that produced the log record is never affected.
"""
from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from threading import Thread
from typing import Any, Optional
from urllib.parse import urlparse

import requests

__all__ = ["emit", "LOGGER_NAME"]

LOGGER_NAME = "guardian.monitoring"
log = logging.getLogger(LOGGER_NAME)

CONNECT_TIMEOUT_S = float(os.getenv("MONITORING_CONNECT_TIMEOUT_S", "1.5"))
READ_TIMEOUT_S    = float(os.getenv("MONITORING_READ_TIMEOUT_S", "3.0"))


def _post(url: str, payload: dict) -> None:
    try:
        r = requests.post(url, json=payload, timeout=(CONNECT_TIMEOUT_S, READ_TIMEOUT_S))
        if r.status_code >= 400:
            log.info("[monitoring] webhook responded %s", r.status_code)
    except requests.RequestException as e:
        log.info("[monitoring] webhook error: %s", e)


def emit(level: str, message: str, meta: Optional[Any] = None, *,
         webhook_url: Optional[str] = None, background: bool = True) -> bool:
    """
    POST {level, message, meta, timestamp} to the webhook.
    Returns False when nothing was sent (no URL / not https).
    """
    url = webhook_url or os.environ.get("MONITORING_WEBHOOK_URL")
    if not url:
        return False

    try:
        parsed = urlparse(url)
    except ValueError:
        log.info("[monitoring] invalid MONITORING_WEBHOOK_URL")
        return False
    if parsed.scheme != "https" or not parsed.netloc:
        log.info("[monitoring] webhook must use HTTPS")
        return False

    payload = {
        "level": level,
        "message": message,
        "meta": meta,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }

    if background:
        Thread(target=_post, args=(url, payload), daemon=True).start()
    else:
        _post(url, payload)
    return True
