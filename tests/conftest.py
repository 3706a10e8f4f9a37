"""
Shared pytest fixtures for the Cloud Relay API test suite.

Provides:
    - provider: fake Coolify API that records every outbound request
    - settings: configuration pointing at a fresh SQLite file per test
    - make_client: builds a TestClient for given settings
    - client: TestClient with a configured provider credential
    - auth_headers / other_auth_headers: bearer tokens for two owners
"""

import json
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx
import pytest
from fastapi.testclient import TestClient

from cloud_relay_api.app.core.config import Settings
from cloud_relay_api.app.core.security import create_access_token
from cloud_relay_api.app.main import create_app

JWT_SECRET = "test-secret"
OWNER_ID = "user-1"
OTHER_OWNER_ID = "user-2"


@dataclass
class RecordedCall:
    method: str
    path: str
    params: Dict[str, str]
    json: Any
    headers: Dict[str, str] = field(default_factory=dict)


class FakeProvider:
    """Stand-in for the provider API behind an ``httpx.MockTransport``.

    Paths are registered relative to ``/api/v1``.  Unregistered calls
    answer ``200 {}``.
    """

    def __init__(self) -> None:
        self.calls: List[RecordedCall] = []
        self._routes: Dict[Tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}

    def respond(
        self,
        method: str,
        path: str,
        status_code: int = 200,
        json_body: Any = None,
        text: Optional[str] = None,
    ) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if text is not None:
                return httpx.Response(status_code, text=text)
            return httpx.Response(status_code, json=json_body if json_body is not None else {})

        self._routes[(method, f"/api/v1{path}")] = handler

    def fail(self, method: str, path: str, message: str = "connection refused") -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError(message, request=request)

        self._routes[(method, f"/api/v1{path}")] = handler

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(
            RecordedCall(
                method=request.method,
                path=request.url.path,
                params=dict(request.url.params),
                json=json.loads(request.content) if request.content else None,
                headers=dict(request.headers),
            )
        )
        handler = self._routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(200, json={})
        return handler(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def settings(tmp_path):
    return Settings(
        jwt_secret=JWT_SECRET,
        coolify_api_key="test-key",
        coolify_base_url="https://coolify.test",
        database_url=str(tmp_path / "relay.db"),
    )


@pytest.fixture
def make_client(provider):
    """Return a factory producing a started TestClient for some settings."""
    opened = []

    def _make(app_settings: Settings) -> TestClient:
        test_client = TestClient(create_app(app_settings, provider.transport))
        test_client.__enter__()
        opened.append(test_client)
        return test_client

    yield _make
    for test_client in opened:
        test_client.__exit__(None, None, None)


@pytest.fixture
def client(make_client, settings):
    return make_client(settings)


@pytest.fixture
def unconfigured_client(make_client, settings):
    """Client whose provider API key is empty."""
    return make_client(replace(settings, coolify_api_key=""))


def bearer(owner_id: str, **claims: Any) -> Dict[str, str]:
    token = create_access_token({"u": owner_id, **claims}, JWT_SECRET)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers():
    return bearer(OWNER_ID, email="owner@example.com")


@pytest.fixture
def other_auth_headers():
    return bearer(OTHER_OWNER_ID)


@pytest.fixture
def database_path(client):
    return client.app.state.database_path
