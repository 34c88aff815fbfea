"""
Pytest configuration and fixtures.
"""

import json
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from mapster_popups.config import Settings
from mapster_popups.wordpress import WordPressClient


ACME = {
    "name": "Acme",
    "address": {"street": "Main St 1", "city": "Berlin", "postal_code": "10115"},
    "contact": {"email": "a@x.com", "phone": "123"},
}


class FakeResponse:
    def __init__(self, status, payload=None, headers=None, text=None):
        self.status_code = status
        self._payload = payload
        self.headers = headers or {}
        self.text = text if text is not None else json.dumps(payload)
        self.reason = "Fake"

    def json(self):
        if self._payload is None:
            raise ValueError("no JSON")
        return self._payload


class FakeSession:
    """
    Stands in for requests.Session. Routes are keyed by (METHOD, path below
    /wp-json/wp/v2); a value is a FakeResponse, a list consumed in order, or
    a callable taking the request kwargs.
    """

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls = []
        self.auth = None
        self.closed = False

    def request(self, method, url, **kwargs):
        path = url.split("/wp-json/wp/v2/", 1)[1]
        self.calls.append((method, path, kwargs))
        handler = self.routes.get((method, path))
        if handler is None:
            return FakeResponse(404, {"code": "rest_no_route", "message": "No route"})
        if isinstance(handler, list):
            return handler.pop(0)
        if callable(handler):
            return handler(**kwargs)
        return handler

    def close(self):
        self.closed = True

    def calls_to(self, method, path):
        return [kwargs for m, p, kwargs in self.calls if m == method and p == path]


@pytest.fixture
def records_file(tmp_path):
    path = tmp_path / "output_converted.json"
    path.write_text(json.dumps([ACME]), encoding="utf-8")
    return path


@pytest.fixture
def settings(tmp_path, records_file):
    return Settings(
        _env_file=None,
        wp_url="https://example.com",
        wp_username="admin",
        wp_password="app pass",
        data_file=str(records_file),
        log_dir=str(tmp_path / "logs"),
        max_retries=1,
    )


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def client(session):
    return WordPressClient(
        "https://example.com/",
        "admin",
        "app pass",
        max_retries=1,
        retry_min_wait=0,
        retry_max_wait=0,
        session=session,
    )
