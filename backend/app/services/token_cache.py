"""Amadeus OAuth2 token cache — one process-wide bearer credential."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import httpx

from app.config import settings
from app.exceptions import AuthError
from app.schemas.amadeus import TokenResponse

logger = logging.getLogger(__name__)

TOKEN_PATH = "/v1/security/oauth2/token"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Credential:
    """Bearer token plus the absolute instant the provider expires it."""
    token: str
    expires_at: datetime

    def is_usable(self, now: datetime, margin: timedelta) -> bool:
        return now < self.expires_at - margin


class TokenCache:
    """Caches a client-credentials token and refreshes it on demand.

    Check-and-refresh runs under one lock, so concurrent callers share a
    single in-flight auth request and all receive its result.
    """

    def __init__(
        self,
        client_id: str | None = None,
        client_secret: str | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        clock: Callable[[], datetime] = _utcnow,
        safety_margin_seconds: int | None = None,
    ):
        self._client_id = settings.amadeus_client_id if client_id is None else client_id
        self._client_secret = (
            settings.amadeus_client_secret if client_secret is None else client_secret
        )
        self._client = http_client
        self._owns_client = http_client is None
        self._clock = clock
        self._margin = timedelta(
            seconds=settings.token_safety_margin_seconds
            if safety_margin_seconds is None
            else safety_margin_seconds
        )
        self._credential: Credential | None = None
        self._lock: asyncio.Lock | None = None
        self._lock_loop: asyncio.AbstractEventLoop | None = None

    @property
    def credential(self) -> Credential | None:
        return self._credential

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=settings.amadeus_base_url,
                timeout=settings.amadeus_timeout_seconds,
            )
        return self._client

    def _get_lock(self) -> asyncio.Lock:
        # Created on first use and per event loop; the singleton outlives loops
        loop = asyncio.get_running_loop()
        if self._lock is None or self._lock_loop is not loop:
            self._lock = asyncio.Lock()
            self._lock_loop = loop
        return self._lock

    async def get_token(self) -> Credential:
        """Return the cached credential, authenticating first if it is unusable."""
        async with self._get_lock():
            cached = self._credential
            if cached and cached.is_usable(self._clock(), self._margin):
                return cached
            credential = await self._authenticate()
            self._credential = credential
            return credential

    def invalidate(self, stale: Credential | None = None) -> None:
        """Drop the cached credential; the next get_token re-authenticates.

        With ``stale`` given, only drop the cache if it still holds that
        credential, so a token another task just refreshed survives.
        """
        if stale is None or self._credential is stale:
            self._credential = None

    async def _authenticate(self) -> Credential:
        if not self._client_id or not self._client_secret:
            raise AuthError("Amadeus API key and secret must be configured")

        client = await self._get_client()
        try:
            resp = await client.post(
                TOKEN_PATH,
                data={
                    "grant_type": "client_credentials",
                    "client_id": self._client_id,
                    "client_secret": self._client_secret,
                },
                headers={"Content-Type": "application/x-www-form-urlencoded"},
            )
        except httpx.RequestError as e:
            raise AuthError(f"Amadeus auth request failed: {e}") from e

        if resp.status_code != 200:
            logger.error(f"Amadeus auth rejected: {resp.status_code} {resp.text}")
            raise AuthError(f"Amadeus auth failed with status {resp.status_code}")

        try:
            payload = TokenResponse.model_validate(resp.json())
        except ValueError as e:
            raise AuthError(f"Amadeus auth returned an unreadable token: {e}") from e

        credential = Credential(
            token=payload.access_token,
            expires_at=self._clock() + timedelta(seconds=payload.expires_in),
        )
        logger.info(f"Amadeus token refreshed, valid for {payload.expires_in}s")
        return credential

    async def close(self):
        if self._client and self._owns_client:
            await self._client.aclose()
            self._client = None


token_cache = TokenCache()
