"""
Shared test fixtures for Jamf classic SDK tests.

Provides a fake Jamf server on ``httpx.MockTransport``, configuration
and token fixtures.
"""

from __future__ import annotations

import json
from datetime import UTC, datetime, timedelta

import httpx
import pytest

from jamf_classic_sdk.config import ClientConfig
from jamf_classic_sdk.models import BearerToken

DOMAIN = "https://jamf.example.com"


def rfc3339(delta: timedelta) -> str:
    """RFC3339 timestamp ``delta`` from now."""
    return (datetime.now(UTC) + delta).strftime("%Y-%m-%dT%H:%M:%SZ")


class FakeJamf:
    """Minimal Jamf server: token exchange plus a few classic resources.

    Unknown paths answer 500 with ``bad API call to {url}``, like the
    real server's plain text errors.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.token = "abcdefghijklmnopqrstuvwxyz"
        self.token_expires = rfc3339(timedelta(hours=1))
        self.token_status = 200
        self.token_body: str | None = None
        self.routes: dict[str, tuple[str, str]] = {
            "/JSSResource/mock/test": ("text/plain; charset=utf-8", '{"status": "OK"}'),
        }

    @property
    def token_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == "/api/v1/auth/token"]

    @property
    def resource_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.startswith("/JSSResource")]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/api/v1/auth/token" and request.method == "POST":
            body = self.token_body
            if body is None:
                body = json.dumps({"token": self.token, "expires": self.token_expires})
            return httpx.Response(
                self.token_status,
                text=body,
                headers={"Content-Type": "application/json"},
            )
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(
                500,
                text=f"bad API call to {request.url}",
                headers={"Content-Type": "text/plain; charset=utf-8"},
            )
        content_type, body = route
        return httpx.Response(200, text=body, headers={"Content-Type": content_type})

    def http_client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self.handler))

    def async_http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def fake_jamf() -> FakeJamf:
    """Provide a fresh fake Jamf server."""
    return FakeJamf()


@pytest.fixture
def base_config() -> ClientConfig:
    """Provide a basic SDK configuration for testing."""
    return ClientConfig(
        domain=DOMAIN,
        username="fake-username",
        password="mock-password-cool",
    )


@pytest.fixture
def future_token() -> BearerToken:
    """Provide a token valid for another hour."""
    return BearerToken(
        token="abcdefghijklmnopqrstuvwxyz",
        expires=rfc3339(timedelta(hours=1)),
    )

