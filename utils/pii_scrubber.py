# utils/pii_scrubber.py
from __future__ import annotations

import re

__all__ = ["scrub_pii", "PATTERNS"]

# Applied in order: the broad phone pattern must run after SSN/card so it
# cannot eat part of those digit runs.
PATTERNS: list[tuple[re.Pattern, str]] = [
    (re.compile(r"\b\d{3}-\d{2}-\d{4}\b", re.ASCII), "[REDACTED-SSN]"),
    (re.compile(r"\b\d{3} \d{2} \d{4}\b", re.ASCII), "[REDACTED-SSN]"),
    (re.compile(r"\b\d{16}\b", re.ASCII), "[REDACTED-CARD]"),
    (re.compile(r"\b\d{4}[- ]\d{4}[- ]\d{4}[- ]\d{4}\b", re.ASCII), "[REDACTED-CARD]"),
    (
        re.compile(r"\b(?:\+?\d{1,3}[ -]?)?(?:\(\d{3}\)|\d{3})[ -]?\d{3}[ -]?\d{4}\b", re.ASCII),
        "[REDACTED-PHONE]",
    ),
    (re.compile(r"[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}", re.IGNORECASE | re.ASCII), "[REDACTED-EMAIL]"),
]


def scrub_pii(value):
    """Redact SSNs, card numbers, phone numbers and emails. Non-strings pass through."""
    if not value or not isinstance(value, str):
        return value

    sanitized = value
    for pattern, replacement in PATTERNS:
        sanitized = pattern.sub(replacement, sanitized)
    return sanitized
