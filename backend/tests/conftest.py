from collections.abc import Callable
from datetime import datetime, timedelta, timezone

import httpx
import pytest

from app.services.amadeus_client import AmadeusClient
from app.services.token_cache import TOKEN_PATH, TokenCache

BASE_URL = "https://test.api.amadeus.com"

Route = dict | list | Callable[[httpx.Request], httpx.Response]


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2026, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class FakeAmadeus:
    """In-memory Amadeus: issues numbered tokens and serves canned routes."""

    def __init__(self, expires_in: int = 1799):
        self.expires_in = expires_in
        self.routes: dict[str, Route] = {}
        self.requests: list[httpx.Request] = []
        self.token_count = 0
        self.auth_status = 200

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == TOKEN_PATH:
            if self.auth_status != 200:
                return httpx.Response(self.auth_status, json={"error": "invalid_client"})
            self.token_count += 1
            return httpx.Response(
                200,
                json={"access_token": f"token-{self.token_count}", "expires_in": self.expires_in},
            )

        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, json={"errors": [{"code": 141, "title": "NOT FOUND"}]})
        if callable(route):
            return route(request)
        return httpx.Response(200, json=route)

    def api_requests(self, path: str | None = None) -> list[httpx.Request]:
        return [
            r for r in self.requests
            if r.url.path != TOKEN_PATH and (path is None or r.url.path == path)
        ]

    def http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler), base_url=BASE_URL)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_amadeus() -> FakeAmadeus:
    return FakeAmadeus()


@pytest.fixture
def tokens(fake_amadeus, clock) -> TokenCache:
    return TokenCache(
        "test-key",
        "test-secret",
        http_client=fake_amadeus.http_client(),
        clock=clock,
    )


@pytest.fixture
def amadeus(fake_amadeus, tokens) -> AmadeusClient:
    return AmadeusClient(tokens, http_client=fake_amadeus.http_client())
