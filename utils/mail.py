# utils/mail.py
import smtplib
import socket
import ssl
from email.message import EmailMessage
from typing import List, Optional, Tuple

from flask import current_app

__all__ = ["send_email", "missing_smtp_settings", "mask_email"]

SMTP_KEYS = ("SMTP_HOST", "SMTP_PORT", "SMTP_USER", "SMTP_PASS")


def mask_email(addr: Optional[str]) -> str:
    if not addr:
        return ""
    try:
        local, domain = addr.split("@", 1)
    except ValueError:
        return addr
    local_mask = local[0] + "***" if len(local) > 1 else "*"
    # keep domain TLD visible
    dot = domain.rfind(".")
    if dot > 0:
        dom_mask = domain[0] + "***" + domain[dot:]
    else:
        dom_mask = domain[0] + "***"
    return f"{local_mask}@{dom_mask}"


def missing_smtp_settings() -> List[str]:
    cfg = current_app.config
    return [k for k in SMTP_KEYS if not cfg.get(k)]


def _port_plan(port: int) -> List[Tuple[str, int]]:
    # Configured port first; 465 means implicit TLS
    first = ("SSL", port) if port == 465 else ("STARTTLS", port)
    plan = [first]
    for fallback in (("STARTTLS", 587), ("SSL", 465)):
        if fallback[1] != port:
            plan.append(fallback)
    return plan


def send_email(*, to: str, subject: str, html: str = "", text: str = "") -> None:
    """
    Send an email through the configured SMTP relay.
    Required config: SMTP_HOST, SMTP_PORT, SMTP_USER, SMTP_PASS (MAIL_FROM optional).
    Raises RuntimeError when every attempt fails.
    """
    cfg = current_app.config
    missing = missing_smtp_settings()
    if missing:
        raise RuntimeError(f"SMTP not configured; missing {', '.join(missing)}")

    host = cfg["SMTP_HOST"]
    login = cfg["SMTP_USER"]
    password = cfg["SMTP_PASS"]
    mail_from = cfg.get("MAIL_FROM") or login

    msg = EmailMessage()
    msg["From"] = mail_from
    msg["To"] = to
    msg["Subject"] = subject
    msg.set_content(text or "")
    if html:
        msg.add_alternative(html, subtype="html")

    last_err: Optional[Exception] = None

    for mode, port in _port_plan(int(cfg["SMTP_PORT"])):
        try:
            ctx = ssl.create_default_context()
            if mode == "SSL":
                with smtplib.SMTP_SSL(host, port, context=ctx, timeout=20) as s:
                    s.login(login, password)
                    s.send_message(msg)
            else:
                with smtplib.SMTP(host, port, timeout=20) as s:
                    s.ehlo()
                    s.starttls(context=ctx)
                    s.ehlo()
                    s.login(login, password)
                    s.send_message(msg)

            current_app.logger.info("[mail] sent via %s:%s to %s", host, port, mask_email(to))
            return
        except (smtplib.SMTPException, OSError, socket.error) as e:
            last_err = e
            current_app.logger.warning("[mail] attempt %s %s:%s failed: %r", mode, host, port, e)

    raise RuntimeError(f"All SMTP attempts failed; last error: {last_err!r}")
