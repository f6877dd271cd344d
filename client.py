# client.py
"""
Small HTTP client for the Guardian API.

    client = GuardianClient("https://guardian.example.org", MemoryTokenStore())
    client.login("maria.lopez", "Guardian!234")
    reports = client.get("/api/v1/reports").json()["data"]

Tokens live in an injected store. A 401 triggers one refresh-and-replay;
a failed refresh clears the store and surfaces the original 401.
"""
from __future__ import annotations

import ipaddress
import logging
from typing import Optional
from urllib.parse import urlsplit

import requests

log = logging.getLogger(__name__)

REFRESH_PATH = "/api/v1/auth/refresh"
DEFAULT_TIMEOUT = (3.05, 15)


class MemoryTokenStore:
    """Keeps the access/refresh pair in process memory."""

    def __init__(self, access_token: Optional[str] = None, refresh_token: Optional[str] = None):
        self.access_token = access_token
        self.refresh_token = refresh_token

    def get_access_token(self) -> Optional[str]:
        return self.access_token

    def get_refresh_token(self) -> Optional[str]:
        return self.refresh_token

    def save(self, access_token: Optional[str], refresh_token: Optional[str]) -> None:
        self.access_token = access_token
        self.refresh_token = refresh_token

    def clear(self) -> None:
        self.access_token = None
        self.refresh_token = None


def _is_local_host(host: str) -> bool:
    if host == "localhost" or host.endswith(".localhost"):
        return True
    try:
        ip = ipaddress.ip_address(host)
    except ValueError:
        return False
    return ip.is_loopback or ip.is_private


def validate_base_url(base_url: str) -> str:
    """https anywhere; plain http only for loopback/private hosts."""
    parts = urlsplit(base_url or "")
    if not parts.hostname:
        raise ValueError(f"Invalid base URL: {base_url!r}")
    if parts.scheme == "https":
        return base_url.rstrip("/")
    if parts.scheme == "http" and _is_local_host(parts.hostname):
        return base_url.rstrip("/")
    raise ValueError(f"Refusing insecure base URL {base_url!r}; use https")


class GuardianClient:
    def __init__(self, base_url: str, token_store=None, session: Optional[requests.Session] = None,
                 timeout=DEFAULT_TIMEOUT):
        self.base_url = validate_base_url(base_url)
        self.tokens = token_store if token_store is not None else MemoryTokenStore()
        self.session = session or requests.Session()
        self.timeout = timeout

    # ── plumbing ─────────────────────────────────────────────────────────
    def _headers(self, extra: Optional[dict] = None) -> dict:
        headers = dict(extra or {})
        access = self.tokens.get_access_token()
        refresh = self.tokens.get_refresh_token()
        if access:
            headers["Authorization"] = f"Bearer {access}"
        if refresh:
            headers["refresh-token"] = refresh
        return headers

    def _send(self, method: str, path: str, headers: Optional[dict] = None, **kwargs) -> requests.Response:
        kwargs.setdefault("timeout", self.timeout)
        return self.session.request(method, self.base_url + path, headers=self._headers(headers), **kwargs)

    def _refresh(self) -> bool:
        refresh = self.tokens.get_refresh_token()
        if not refresh:
            return False
        try:
            resp = self.session.post(
                self.base_url + REFRESH_PATH,
                headers={"refresh-token": refresh},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            log.warning("[client] refresh failed: %s", e)
            return False
        if resp.status_code != 200:
            log.info("[client] refresh rejected status=%s", resp.status_code)
            return False

        data = (resp.json() or {}).get("data") or {}
        access, new_refresh = data.get("accessToken"), data.get("refreshToken")
        if not access or not new_refresh:
            return False
        self.tokens.save(access, new_refresh)
        return True

    def request(self, method: str, path: str, **kwargs) -> requests.Response:
        """
        Send a request. Non-2xx responses raise requests.HTTPError.
        A 401 is retried exactly once after a successful token refresh.
        """
        resp = self._send(method, path, **kwargs)
        if resp.status_code == 401 and path != REFRESH_PATH:
            if self._refresh():
                resp = self._send(method, path, **kwargs)
            else:
                self.tokens.clear()
        resp.raise_for_status()
        return resp

    def get(self, path: str, **kwargs) -> requests.Response:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs) -> requests.Response:
        return self.request("POST", path, **kwargs)

    def put(self, path: str, **kwargs) -> requests.Response:
        return self.request("PUT", path, **kwargs)

    def patch(self, path: str, **kwargs) -> requests.Response:
        return self.request("PATCH", path, **kwargs)

    def delete(self, path: str, **kwargs) -> requests.Response:
        return self.request("DELETE", path, **kwargs)

    # ── auth helpers ─────────────────────────────────────────────────────
    def _keep_tokens(self, resp: requests.Response) -> dict:
        data = resp.json().get("data") or {}
        if data.get("accessToken") and data.get("refreshToken"):
            self.tokens.save(data["accessToken"], data["refreshToken"])
        return data

    def login(self, username: str, password: str) -> dict:
        """Returns the login payload; when `mfa_required` is set, call verify_mfa next."""
        resp = self.post("/api/v1/auth/login", json={"username": username, "password": password})
        return self._keep_tokens(resp)

    def verify_mfa(self, mfa_token: str, code: str) -> dict:
        resp = self.post("/api/v1/mfa/verify-code", json={"mfa_token": mfa_token, "code": code})
        return self._keep_tokens(resp)

    def resend_mfa(self, mfa_token: str) -> str:
        resp = self.post("/api/v1/mfa/resend-code", json={"mfa_token": mfa_token})
        return resp.json()["data"]["mfa_token"]

    def logout(self) -> None:
        try:
            self.post("/api/v1/auth/logout")
        finally:
            self.tokens.clear()
