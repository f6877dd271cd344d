from unittest.mock import MagicMock

import pytest
import requests

from client import GuardianClient, MemoryTokenStore, validate_base_url


def _response(status, body=None):
    resp = MagicMock(spec=requests.Response)
    resp.status_code = status
    resp.json.return_value = body or {}

    def _raise():
        if status >= 400:
            raise requests.HTTPError(f"{status} error", response=resp)

    resp.raise_for_status.side_effect = _raise
    return resp


@pytest.mark.parametrize("url", [
    "https://guardian.example.org",
    "http://localhost:8080",
    "http://127.0.0.1:5000",
    "http://192.168.1.20",
    "http://10.0.2.2:8080/",
])
def test_accepted_base_urls(url):
    assert validate_base_url(url) == url.rstrip("/")


@pytest.mark.parametrize("url", ["http://guardian.example.org", "ftp://localhost", "not a url", "http://8.8.8.8"])
def test_rejected_base_urls(url):
    with pytest.raises(ValueError):
        GuardianClient(url, MemoryTokenStore(), session=MagicMock())


def test_sends_bearer_and_refresh_headers():
    session = MagicMock()
    session.request.return_value = _response(200, {"data": []})
    client = GuardianClient("https://api.test", MemoryTokenStore("acc", "ref"), session=session)

    client.get("/api/v1/alerts")

    _, kwargs = session.request.call_args
    assert kwargs["headers"]["Authorization"] == "Bearer acc"
    assert kwargs["headers"]["refresh-token"] == "ref"
    assert session.request.call_args.args == ("GET", "https://api.test/api/v1/alerts")


def test_no_auth_headers_without_tokens():
    session = MagicMock()
    session.request.return_value = _response(200)
    GuardianClient("https://api.test", MemoryTokenStore(), session=session).get("/")

    assert session.request.call_args.kwargs["headers"] == {}


def test_401_refreshes_once_and_replays():
    store = MemoryTokenStore("old-acc", "old-ref")
    session = MagicMock()
    session.request.side_effect = [_response(401), _response(200, {"data": "ok"})]
    session.post.return_value = _response(200, {"data": {"accessToken": "new-acc", "refreshToken": "new-ref"}})
    client = GuardianClient("https://api.test", store, session=session)

    resp = client.get("/api/v1/reports")

    assert resp.json() == {"data": "ok"}
    session.post.assert_called_once()
    assert session.post.call_args.kwargs["headers"] == {"refresh-token": "old-ref"}
    assert (store.access_token, store.refresh_token) == ("new-acc", "new-ref")
    assert session.request.call_count == 2
    assert session.request.call_args.kwargs["headers"]["Authorization"] == "Bearer new-acc"


def test_failed_refresh_clears_tokens_and_raises_original_401():
    store = MemoryTokenStore("old-acc", "old-ref")
    session = MagicMock()
    session.request.return_value = _response(401)
    session.post.return_value = _response(401)
    client = GuardianClient("https://api.test", store, session=session)

    with pytest.raises(requests.HTTPError) as err:
        client.get("/api/v1/reports")

    assert err.value.response.status_code == 401
    assert store.access_token is None and store.refresh_token is None
    assert session.request.call_count == 1


def test_second_401_is_not_retried_again():
    store = MemoryTokenStore("acc", "ref")
    session = MagicMock()
    session.request.return_value = _response(401)
    session.post.return_value = _response(200, {"data": {"accessToken": "a2", "refreshToken": "r2"}})
    client = GuardianClient("https://api.test", store, session=session)

    with pytest.raises(requests.HTTPError):
        client.get("/api/v1/reports")

    assert session.request.call_count == 2
    assert session.post.call_count == 1


def test_no_refresh_token_means_no_refresh_call():
    store = MemoryTokenStore("acc", None)
    session = MagicMock()
    session.request.return_value = _response(401)
    client = GuardianClient("https://api.test", store, session=session)

    with pytest.raises(requests.HTTPError):
        client.get("/api/v1/reports")
    session.post.assert_not_called()
    assert store.access_token is None


def test_refresh_network_error_counts_as_failure():
    store = MemoryTokenStore("acc", "ref")
    session = MagicMock()
    session.request.return_value = _response(401)
    session.post.side_effect = requests.ConnectionError("down")
    client = GuardianClient("https://api.test", store, session=session)

    with pytest.raises(requests.HTTPError):
        client.get("/api/v1/reports")
    assert store.refresh_token is None


def test_login_keeps_tokens_from_body():
    store = MemoryTokenStore()
    session = MagicMock()
    session.request.return_value = _response(200, {"data": {
        "mfa_required": False, "accessToken": "a", "refreshToken": "r",
    }})
    client = GuardianClient("https://api.test", store, session=session)

    assert client.login("oliver", "pw")["mfa_required"] is False
    assert (store.access_token, store.refresh_token) == ("a", "r")
