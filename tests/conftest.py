# tests/conftest.py
from __future__ import annotations

import os
from typing import Iterator
from urllib.parse import parse_qsl, urlparse

import pytest
from fastapi.testclient import TestClient

# ---------- Env (must be set before the package reads its config) ----------
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("FRONTEND_ORIGIN", "http://localhost:5173")
os.environ.setdefault("SSO_TOKEN_DELIVERY", "cookie")

from training_api.app import create_app  # noqa: E402
from training_api.core import make_engine  # noqa: E402
from training_api.services import CredentialStore  # noqa: E402
from training_api.services.sso import github_provider, google_provider  # noqa: E402

FRONTEND = "http://localhost:5173"

GITHUB_TOKEN_URL = "https://github.com/login/oauth/access_token"
GITHUB_USER_URL = "https://api.github.com/user"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v2/userinfo"


def sso_providers():
    return [
        google_provider(
            client_id="google-client",
            client_secret="google-secret",
            redirect_uri="http://testserver/",
        ),
        github_provider(
            client_id="github-client",
            client_secret="github-secret",
            redirect_uri="http://testserver/auth/github/callback",
        ),
    ]


def query_of(location: str) -> dict:
    return dict(parse_qsl(urlparse(location).query))


# ---------- Fixtures ----------
@pytest.fixture
def store() -> CredentialStore:
    """Fresh in-memory account database per test."""
    store = CredentialStore(make_engine("sqlite://"))
    store.create_schema()
    return store


@pytest.fixture
def make_client(store):
    def _make(providers=None, token_delivery: str = "cookie") -> TestClient:
        app = create_app(
            store=store,
            providers=sso_providers() if providers is None else providers,
            token_delivery=token_delivery,
        )
        return TestClient(app, follow_redirects=False)

    return _make


@pytest.fixture
def client(make_client) -> Iterator[TestClient]:
    with make_client() as c:
        yield c


@pytest.fixture
def start_sso():
    """Begin an SSO login and return the ``state`` the provider would echo back."""

    def _start(client: TestClient, provider: str) -> str:
        r = client.get(f"/auth/{provider}")
        assert r.status_code == 302, r.text
        return query_of(r.headers["location"])["state"]

    return _start
