import io
import json
import urllib.error
from unittest import mock

import pytest

from txoko.client.errors import FetchError
from txoko.client.http import ApiClient
from txoko.client.http import auth_fetch
from txoko.client.http import build_headers
from txoko.client.storage import LANGUAGE_KEY
from txoko.client.storage import TOKEN_KEY
from txoko.client.storage import TokenStore


@pytest.fixture
def store(tmp_path):
    return TokenStore(tmp_path / "storage.json")


class FakeResponse:
    def __init__(self, status=200, payload=None):
        self.status = status
        self._body = json.dumps(payload).encode() if payload is not None else b""
        self.headers = {"Content-Type": "application/json"}

    def read(self):
        return self._body

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        return False


def _http_error(url, status, payload):
    body = io.BytesIO(json.dumps(payload).encode())
    return urllib.error.HTTPError(url, status, "error", {}, body)


def test_headers_without_token(store):
    headers = build_headers(store)
    assert headers == {"Content-Type": "application/json", "Accept-Language": "eu"}


def test_headers_with_token_and_override(store):
    store.set(TOKEN_KEY, "tok")
    store.set(LANGUAGE_KEY, "es")
    headers = build_headers(store, {"Content-Type": "text/plain"})
    assert headers["Authorization"] == "Bearer tok"
    assert headers["Accept-Language"] == "es"
    assert headers["Content-Type"] == "text/plain"


def test_auth_fetch_sends_json_body(store):
    store.set(TOKEN_KEY, "tok")
    with mock.patch(
        "urllib.request.urlopen", return_value=FakeResponse(201, {"ok": True})
    ) as urlopen:
        response = auth_fetch(
            "http://api/x", "post", body={"a": 1}, store=store, timeout=3
        )
    req = urlopen.call_args.args[0]
    assert req.get_method() == "POST"
    assert json.loads(req.data) == {"a": 1}
    assert req.get_header("Authorization") == "Bearer tok"
    assert urlopen.call_args.kwargs["timeout"] == 3  # noqa: PLR2004
    assert response.ok
    assert response.json() == {"ok": True}


def test_auth_fetch_returns_error_responses(store):
    error = _http_error("http://api/x", 403, {"message": "nope"})
    with mock.patch("urllib.request.urlopen", side_effect=error):
        response = auth_fetch("http://api/x", store=store)
    assert response.status == 403  # noqa: PLR2004
    assert not response.ok


def test_auth_fetch_transport_failure(store):
    error = urllib.error.URLError("connection refused")
    with mock.patch("urllib.request.urlopen", side_effect=error):
        with pytest.raises(FetchError) as excinfo:
            auth_fetch("http://api/x", store=store)
    assert excinfo.value.status == 0
    assert excinfo.value.message == "connection refused"


def test_client_builds_urls(store):
    client = ApiClient("http://api/api/v1/", store)
    assert client.url("/users/me/") == "http://api/api/v1/users/me/"
    assert (
        client.url("notifications/recent/", {"lang": None, "filter": "unread"})
        == "http://api/api/v1/notifications/recent/?filter=unread"
    )


def test_client_raises_api_message(store):
    client = ApiClient("http://api/api/v1", store)
    error = _http_error(client.url("x"), 400, {"detail": "Bad", "message": "Wrong"})
    with mock.patch("urllib.request.urlopen", side_effect=error):
        with pytest.raises(FetchError) as excinfo:
            client.get("x")
    assert excinfo.value.status == 400  # noqa: PLR2004
    assert excinfo.value.message == "Wrong"
    assert str(excinfo.value) == "400: Wrong"


def test_client_returns_payload(store):
    client = ApiClient("http://api/api/v1", store)
    with mock.patch(
        "urllib.request.urlopen", return_value=FakeResponse(200, {"count": 2})
    ):
        assert client.get("notifications/unread-count/") == {"count": 2}
    with mock.patch("urllib.request.urlopen", return_value=FakeResponse(204)):
        assert client.delete("announcements/1/") is None
