# utils/encryption.py
"""
Field-level encryption for data at rest (AES-256-GCM).

Stored format: "<b64 iv>:<b64 ciphertext>:<b64 tag>". Values that are not in
that format are returned untouched by decrypt(), so rows written before
encryption was enabled stay readable.
"""
from __future__ import annotations

import base64
import binascii
import logging
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from flask import current_app, has_app_context
from sqlalchemy.types import Text, TypeDecorator

__all__ = ["encrypt", "decrypt", "EncryptedText", "reset_key_cache"]

log = logging.getLogger(__name__)

IV_LENGTH = 12
TAG_LENGTH = 16
_cached_key: bytes | None = None


def _configured_key() -> str | None:
    if has_app_context():
        val = current_app.config.get("DATA_ENCRYPTION_KEY")
        if val:
            return val
    return os.environ.get("DATA_ENCRYPTION_KEY")


def _resolve_key() -> bytes:
    global _cached_key
    if _cached_key is not None:
        return _cached_key

    configured = _configured_key()
    if configured:
        normalized = configured.strip()
        try:
            if len(normalized) == 64:
                key = bytes.fromhex(normalized)
            else:
                key = base64.b64decode(normalized, validate=True)
        except (ValueError, binascii.Error):
            raise ValueError("DATA_ENCRYPTION_KEY must be hex or base64")
        if len(key) != 32:
            raise ValueError("DATA_ENCRYPTION_KEY must be a 32 byte key")
        _cached_key = key
        return _cached_key

    log.warning("[crypto] DATA_ENCRYPTION_KEY missing. Generating ephemeral key for runtime only.")
    _cached_key = AESGCM.generate_key(bit_length=256)
    return _cached_key


def reset_key_cache() -> None:
    global _cached_key
    _cached_key = None


def encrypt(value):
    if value is None:
        return None

    iv = os.urandom(IV_LENGTH)
    sealed = AESGCM(_resolve_key()).encrypt(iv, str(value).encode("utf-8"), None)
    # cryptography appends the tag; keep it as its own segment
    ciphertext, tag = sealed[:-TAG_LENGTH], sealed[-TAG_LENGTH:]
    return ":".join(base64.b64encode(p).decode("ascii") for p in (iv, ciphertext, tag))


def decrypt(value):
    if value is None:
        return None
    if not isinstance(value, str) or value.count(":") != 2:
        return value

    try:
        iv, ciphertext, tag = (base64.b64decode(p) for p in value.split(":"))
        plain = AESGCM(_resolve_key()).decrypt(iv, ciphertext + tag, None)
        return plain.decode("utf-8")
    except (InvalidTag, ValueError, binascii.Error) as e:
        log.error("[crypto] Unable to decrypt field: %s", e)
        return value


class EncryptedText(TypeDecorator):
    """Text column that is encrypted on write and decrypted on read."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return encrypt(value)

    def process_result_value(self, value, dialect):
        return decrypt(value)
