# utils/http_error.py
from __future__ import annotations

from http import HTTPStatus
from typing import Any

from flask import jsonify, current_app

__all__ = ["HttpError", "http_response"]


def _default_message(code: int | None) -> str:
    if not code:
        return "Error"
    try:
        return HTTPStatus(code).phrase
    except ValueError:
        return "Error"


class HttpError(Exception):
    """
    An error that maps straight onto an HTTP response.

    `client_message` is what the caller sees; `message` (str(err)) may carry
    the wrapped exception's text for the logs.
    """

    def __init__(
        self,
        code: int = 500,
        client_message: str = "",
        data: dict | None = None,
        path: str = "",
        err: Exception | None = None,
    ):
        fallback = (
            client_message
            or getattr(err, "client_message", "")
            or (str(err) if err else "")
            or _default_message(code)
        )
        super(HttpError, self).__init__(str(err) if err else fallback)
        self.code = code
        self.client_message = fallback
        self.data = data or {}
        self.path = path
        if err is not None:
            self.__cause__ = err

    def to_response(self):
        body = {
            "status": "error",
            "code": self.code,
            "message": self.client_message,
            "data": self.data,
        }
        return jsonify(body), self.code

    def log(self) -> None:
        level = current_app.logger.error if self.code >= 500 else current_app.logger.info
        level("[http] %s %s path=%s", self.code, self, self.path or "-")


def http_response(code: int = 200, data: Any = None):
    """Success envelope used by every route: {"status": "success", "data": ...}."""
    if code == 204:
        return "", 204
    return jsonify(status="success", data=data), code
