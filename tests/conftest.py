"""
Shared fixtures.
"""
import pytest
from fastapi.testclient import TestClient
from starlette.requests import Request

from multisite.config import Settings
from multisite.main import create_app

DATA = {
    "config": {"site.title": "multisite"},
    "pages": [
        {"id": 1, "title": "Home", "slug": "/"},
        {"id": 2, "title": "About", "slug": "about", "parent_id": 1},
        {"id": 10, "title": "Docs", "slug": "/"},
        {"id": 11, "title": "Getting Started", "slug": "getting-started", "parent_id": 10},
    ],
    "sites": [
        {
            "name": "Main",
            "domain": r"(www\.)?example\.com",
            "base_domain": "example.com",
            "homepage_id": 1,
        },
        {
            "name": "Docs",
            "domain": r"docs\.example\.com",
            "base_domain": "docs.example.com",
            "homepage_id": 10,
        },
    ],
}


@pytest.fixture
def data():
    """A fresh copy of the data file contents."""
    return {
        "config": dict(DATA["config"]),
        "pages": [dict(page) for page in DATA["pages"]],
        "sites": [dict(site) for site in DATA["sites"]],
    }


@pytest.fixture
def settings(tmp_path):
    """Test settings with multi-site switched on."""
    return Settings(
        environment="test",
        enable_multisite=True,
        data_path=str(tmp_path / "missing.yaml"),
    )


@pytest.fixture
def app(settings, data):
    return create_app(settings, data=data)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def cms(app):
    return app.state.cms


@pytest.fixture
def make_request():
    """Build a bare starlette request."""

    def build(path="/", query_string=b"", headers=None, path_params=None, method="GET", app=None):
        scope = {
            "type": "http",
            "method": method,
            "path": path,
            "query_string": query_string,
            "headers": [
                (name.lower().encode(), value.encode())
                for name, value in (headers or {}).items()
            ],
            "path_params": path_params or {},
        }
        if app is not None:
            scope["app"] = app
        return Request(scope)

    return build
