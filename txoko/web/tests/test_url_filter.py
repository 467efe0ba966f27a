from types import SimpleNamespace

from django.test import RequestFactory

from txoko.web.url_filter import RecordingHistory
from txoko.web.url_filter import RequestLocation
from txoko.web.url_filter import UrlFilter


def _filter(search="", default="", param="filter"):
    location = SimpleNamespace(path="/notifications", search=search)
    history = RecordingHistory()
    return UrlFilter(location, history, default=default, param=param), history


def test_initial_value_from_query():
    url_filter, history = _filter("?filter=abc")
    assert url_filter.value == "abc"
    assert history.entries == []


def test_default_when_absent():
    url_filter, _ = _filter("?page=2", default="all")
    assert url_filter.value == "all"


def test_set_value_keeps_other_params_in_place():
    url_filter, history = _filter("?page=2&filter=read&lang=es")
    url_filter.set_value("unread")
    assert url_filter.value == "unread"
    assert history.current == "/notifications?page=2&filter=unread&lang=es"


def test_default_value_drops_param():
    url_filter, history = _filter("?filter=read&page=2", default="all")
    url_filter.set_value("all")
    assert history.current == "/notifications?page=2"


def test_clear_resets_to_empty_even_with_default():
    url_filter, history = _filter("?filter=read", default="all")
    url_filter.clear()
    assert url_filter.value == ""
    assert history.current == "/notifications"


def test_same_url_is_not_replaced_twice():
    url_filter, history = _filter()
    url_filter.set_value("x")
    url_filter.set_value("x")
    url_filter.set_value("y")
    url_filter.set_value("x")
    assert history.entries == [
        "/notifications?filter=x",
        "/notifications?filter=y",
        "/notifications?filter=x",
    ]


def test_custom_param_name():
    url_filter, history = _filter("?q=kuota", param="q")
    assert url_filter.value == "kuota"
    url_filter.set_value("afaria")
    assert history.current == "/notifications?q=afaria"


def test_request_location():
    request = RequestFactory().get("/notifications/", {"filter": "read"})
    location = RequestLocation(request)
    assert location.path == "/notifications/"
    assert location.search == "?filter=read"
    assert RequestLocation(RequestFactory().get("/")).search == ""


def test_starting_url_counts_as_applied():
    url_filter, history = _filter("?filter=read", default="all")
    url_filter.set_value("read")
    assert history.entries == []
    url_filter.set_value("unread")
    assert history.entries == ["/notifications?filter=unread"]
