# services/files.py
"""
Signed, time-boxed access to uploaded files.

A file token is a JWT signed with JWT_FILES_SECRET:
    {"sub": <file path>, "actor": <user id or null>, "exp": <unix seconds>}
Tokens are stateless; they simply stop verifying once `exp` passes.
"""
from __future__ import annotations

import os
import time
import uuid
from typing import Optional, Tuple

import jwt
from flask import current_app
from PIL import Image, ImageOps, UnidentifiedImageError
from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from services import audit

__all__ = [
    "generate_file_token",
    "get_file_name_from_token",
    "sanitize_image",
    "save_upload",
    "record_upload",
    "record_download",
    "discard_uploads",
]

ALGORITHM = "HS256"
ALLOWED_IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp", ".gif"}


def _secret() -> str:
    return current_app.config["JWT_FILES_SECRET"]


def generate_file_token(file_path: str, actor_id: Optional[int] = None,
                        expires_in_seconds: Optional[int] = None) -> str:
    if expires_in_seconds is None:
        expires_in_seconds = int(current_app.config.get("FILE_TOKEN_TTL_SECONDS", 600))
    # whole seconds; callers compare exp exactly
    exp = int(time.time()) + int(expires_in_seconds)
    return jwt.encode(
        {"sub": file_path, "exp": exp, "actor": actor_id},
        _secret(),
        algorithm=ALGORITHM,
    )


def get_file_name_from_token(token: str) -> Tuple[str, Optional[int]]:
    """
    Verify a file token and return (file_path, actor_id).
    Raises jwt.ExpiredSignatureError / jwt.InvalidTokenError.
    """
    payload = jwt.decode(
        token,
        _secret(),
        algorithms=[ALGORITHM],
        options={"require": ["sub", "exp"]},
    )
    file_path = payload.get("sub")
    actor = payload.get("actor")
    if not isinstance(file_path, str) or not file_path:
        raise jwt.InvalidTokenError("file token has no file path")
    if actor is not None and (isinstance(actor, bool) or not isinstance(actor, int)):
        raise jwt.InvalidTokenError("file token actor must be an integer")
    return file_path, actor


def sanitize_image(file_path: str) -> None:
    """Re-encode an image in place so EXIF (GPS, device, ...) is dropped."""
    try:
        with Image.open(file_path) as img:
            fmt = img.format
            # bake the orientation in before the EXIF tag goes away
            clean = ImageOps.exif_transpose(img)
            clean.info.pop("exif", None)
            clean.save(file_path, format=fmt)
    except (OSError, UnidentifiedImageError) as e:
        current_app.logger.error("[files] image_sanitization_failed path=%s error=%s", file_path, e)
        raise


def save_upload(file: FileStorage, upload_dir: Optional[str] = None) -> str:
    """Store an uploaded file under UPLOAD_DIR with a unique name; returns its path."""
    upload_dir = upload_dir or current_app.config["UPLOAD_DIR"]
    os.makedirs(upload_dir, exist_ok=True)

    ext = os.path.splitext(file.filename or "")[1].lower()
    if ext not in ALLOWED_IMAGE_EXTENSIONS:
        ext = ".bin"
    fname = secure_filename(f"{uuid.uuid4().hex}{ext}")
    path = os.path.join(upload_dir, fname)
    file.save(path)
    return path


def record_upload(file_path: str, actor_id: Optional[int], commit: bool = True) -> None:
    audit.record_file_event(actor_id=actor_id, action="upload", file_path=file_path, commit=commit)


def record_download(file_path: str, actor_id: Optional[int]) -> None:
    audit.record_file_event(actor_id=actor_id, action="download", file_path=file_path)


def discard_uploads(paths) -> None:
    """Remove files saved for a create that did not commit."""
    for path in paths:
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            current_app.logger.warning("[files] discard_failed path=%s error=%s", path, e)
