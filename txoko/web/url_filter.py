"""A single query-string parameter kept in sync with a string value.

The value is read from the location once, on construction. Every change
rewrites the query string (the parameter is dropped when the value is empty
or equals the default) and replaces the current history entry, unless the
resulting URL is the one applied last.
"""

from __future__ import annotations

from typing import Protocol
from urllib.parse import parse_qsl
from urllib.parse import urlencode

DEFAULT_PARAM = "filter"


class Location(Protocol):
    @property
    def path(self) -> str: ...

    @property
    def search(self) -> str: ...


class History(Protocol):
    def replace_state(self, url: str) -> None: ...


class RequestLocation:
    """``Location`` view of a Django request."""

    def __init__(self, request):
        self.path = request.path
        query = request.META.get("QUERY_STRING", "")
        self.search = f"?{query}" if query else ""


class RecordingHistory:
    """``History`` that remembers every replaced URL."""

    def __init__(self):
        self.entries: list[str] = []

    @property
    def current(self) -> str | None:
        return self.entries[-1] if self.entries else None

    def replace_state(self, url: str) -> None:
        self.entries.append(url)


class UrlFilter:
    def __init__(
        self,
        location: Location,
        history: History,
        default: str = "",
        param: str = DEFAULT_PARAM,
    ):
        self.location = location
        self.history = history
        self.default = default
        self.param = param
        self._pairs = parse_qsl(location.search.lstrip("?"), keep_blank_values=True)
        initial = next((v for k, v in self._pairs if k == param), None)
        self._value = initial if initial is not None else default
        # The starting URL counts as applied.
        self._last_url: str = location.path + location.search

    @property
    def value(self) -> str:
        return self._value

    def url_for(self, value: str) -> str:
        """URL for ``value`` on the current path, without applying it."""
        keep = bool(value) and value != self.default
        pairs: list[tuple[str, str]] = []
        placed = False
        for k, v in self._pairs:
            if k != self.param:
                pairs.append((k, v))
            elif keep and not placed:
                pairs.append((k, value))
                placed = True
        if keep and not placed:
            pairs.append((self.param, value))
        query = urlencode(pairs)
        return self.location.path + (f"?{query}" if query else "")

    def set_value(self, value: str) -> None:
        self._value = value
        url = self.url_for(value)
        if url != self._last_url:
            self.history.replace_state(url)
            self._last_url = url

    def clear(self) -> None:
        # Resets to the empty string even when the default is non-empty.
        self.set_value("")
