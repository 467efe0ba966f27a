"""Authenticated HTTP helper built on ``urllib.request``.

Every request carries JSON content type, the stored UI language and, when a
token is stored under ``auth:token``, a bearer ``Authorization`` header.
Caller-supplied headers win over the defaults.
"""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass
from dataclasses import field
from typing import Any

from .errors import FetchError
from .storage import TokenStore

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


@dataclass
class HttpResponse:
    status: int
    body: bytes = b""
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300  # noqa: PLR2004

    def json(self) -> Any:
        if not self.body:
            return None
        return json.loads(self.body.decode("utf-8"))


def build_headers(
    store: TokenStore,
    headers: dict[str, str] | None = None,
) -> dict[str, str]:
    merged = {
        "Content-Type": "application/json",
        "Accept-Language": store.language,
    }
    token = store.token
    if token:
        merged["Authorization"] = f"Bearer {token}"
    merged.update(headers or {})
    return merged


def auth_fetch(  # noqa: PLR0913
    url: str,
    method: str = "GET",
    headers: dict[str, str] | None = None,
    body: Any | None = None,
    *,
    store: TokenStore | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> HttpResponse:
    """Perform one request and return the response whatever its status.

    ``body`` may be bytes, str or any JSON-serializable object. Only transport
    failures (no response at all) raise ``FetchError`` with status 0.
    """
    store = store or TokenStore()
    if body is None or isinstance(body, bytes):
        data = body
    elif isinstance(body, str):
        data = body.encode("utf-8")
    else:
        data = json.dumps(body).encode("utf-8")

    req = urllib.request.Request(  # noqa: S310 - URL comes from configuration
        url,
        data=data,
        headers=build_headers(store, headers),
        method=method.upper(),
    )
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:  # noqa: S310
            return HttpResponse(resp.status, resp.read(), dict(resp.headers.items()))
    except urllib.error.HTTPError as e:
        return HttpResponse(e.code, e.read(), dict(e.headers.items()))
    except urllib.error.URLError as e:
        logger.warning("%s %s failed: %s", method.upper(), url, e.reason)
        raise FetchError(0, str(e.reason)) from e


def _error_message(response: HttpResponse) -> str:
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        for key in ("message", "detail"):
            if payload.get(key):
                return str(payload[key])
    return f"Request failed with status {response.status}"


class ApiClient:
    """JSON API client rooted at ``base_url`` (e.g. ``http://host/api/v1``)."""

    def __init__(
        self,
        base_url: str,
        store: TokenStore | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.base_url = base_url.rstrip("/")
        self.store = store or TokenStore()
        self.timeout = timeout

    def url(self, path: str, params: dict[str, Any] | None = None) -> str:
        url = f"{self.base_url}/{path.lstrip('/')}"
        if params:
            query = urllib.parse.urlencode(
                {k: v for k, v in params.items() if v is not None}
            )
            if query:
                url = f"{url}?{query}"
        return url

    def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json_body: Any | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        response = auth_fetch(
            self.url(path, params),
            method=method,
            headers=headers,
            body=json_body,
            store=self.store,
            timeout=self.timeout,
        )
        if not response.ok:
            raise FetchError(response.status, _error_message(response))
        try:
            return response.json()
        except ValueError as e:
            raise FetchError(response.status, "Invalid JSON in response") from e

    def get(self, path: str, **params: Any) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, data: Any | None = None) -> Any:
        return self.request("POST", path, json_body=data if data is not None else {})

    def patch(self, path: str, data: Any | None = None) -> Any:
        return self.request("PATCH", path, json_body=data if data is not None else {})

    def put(self, path: str, data: Any | None = None) -> Any:
        return self.request("PUT", path, json_body=data if data is not None else {})

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path)
