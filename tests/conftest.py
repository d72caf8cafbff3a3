"""
Shared test fixtures.

Every test app gets its own SQLite file, a fixed JWT secret, and a RAWG
client wired to an in-process ``httpx.MockTransport``.
"""

from __future__ import annotations

from typing import Callable, List

import httpx
import pytest
from fastapi.testclient import TestClient

from config.settings import Settings
from games.client import RawgClient
from main import create_app

TEST_JWT_SECRET = "test-secret-key-for-testing-only"
TEST_RAWG_KEY = "test-rawg-key-123"


class FakeRawg:
    """Records upstream requests and answers with ``responder``."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.responder: Callable[[httpx.Request], httpx.Response] = (
            lambda request: httpx.Response(200, json={"count": 0, "results": []})
        )

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        result = self.responder(request)
        if hasattr(result, "__await__"):
            result = await result
        return result


def make_settings(tmp_path, **overrides) -> Settings:
    values = dict(
        environment="development",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        db_create_tables=True,
        jwt_secret=TEST_JWT_SECRET,
        bcrypt_rounds=4,
        rawg_api_key=TEST_RAWG_KEY,
        rawg_base_url="https://rawg.test/api",
        upstream_timeout_seconds=0.5,
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


def build_app(settings: Settings, fake: FakeRawg):
    app = create_app(settings)
    app.state.rawg = RawgClient(
        settings.rawg_api_key,
        base_url=settings.rawg_base_url,
        timeout=settings.upstream_timeout_seconds,
        transport=httpx.MockTransport(fake),
    )
    return app


@pytest.fixture
def settings(tmp_path) -> Settings:
    return make_settings(tmp_path)


@pytest.fixture
def fake_rawg() -> FakeRawg:
    return FakeRawg()


@pytest.fixture
def app(settings, fake_rawg):
    return build_app(settings, fake_rawg)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(app) -> dict:
    token = app.state.tokens.issue(1, "tester")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def new_user() -> dict:
    return {
        "fullName": "A B",
        "dob": "2000-01-01",
        "email": "a@b.com",
        "username": "ab",
        "password": "secret1",
    }
