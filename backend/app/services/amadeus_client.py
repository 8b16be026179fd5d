"""Amadeus API client — bearer auth with a single retry on token expiry."""

import asyncio
import logging
from typing import TypeVar

import httpx
from pydantic import BaseModel

from app.config import settings
from app.exceptions import ProviderError
from app.schemas.amadeus import ProviderErrorBody
from app.services.token_cache import Credential, TokenCache, token_cache

logger = logging.getLogger(__name__)

# Amadeus error code for "access token expired"
EXPIRED_TOKEN_CODE = 38192

T = TypeVar("T", bound=BaseModel)


class AmadeusClient:
    """Adapter for Amadeus Self-Service API calls.

    Every call carries the cached bearer token. A 401 reporting an expired
    token invalidates the cache and the request is retried once with a fresh
    token; nothing else is retried.
    """

    def __init__(
        self,
        tokens: TokenCache | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        max_concurrency: int | None = None,
    ):
        self._tokens = tokens or token_cache
        self._client = http_client
        self._owns_client = http_client is None
        self._max_concurrency = max_concurrency or settings.amadeus_max_concurrency
        self._semaphore: asyncio.Semaphore | None = None
        self._semaphore_loop: asyncio.AbstractEventLoop | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=settings.amadeus_base_url,
                timeout=settings.amadeus_timeout_seconds,
            )
        return self._client

    def _get_semaphore(self) -> asyncio.Semaphore:
        loop = asyncio.get_running_loop()
        if self._semaphore is None or self._semaphore_loop is not loop:
            self._semaphore = asyncio.Semaphore(self._max_concurrency)
            self._semaphore_loop = loop
        return self._semaphore

    async def get(
        self, path: str, response_model: type[T], params: dict | None = None
    ) -> T:
        return await self.request("GET", path, response_model, params=params)

    async def request(
        self,
        method: str,
        path: str,
        response_model: type[T],
        *,
        params: dict | None = None,
    ) -> T:
        """Issue an authenticated request and decode the body as ``response_model``.

        Raises:
            AuthError: credentials are missing or rejected.
            ProviderError: non-success status, undecodable body, or the
                retry after a token refresh also failed.
        """
        async with self._get_semaphore():
            credential = await self._tokens.get_token()
            resp = await self._send(method, path, params, credential)

            if resp.status_code == 401 and self._is_token_expired(resp):
                logger.info(f"Amadeus token expired on {method} {path}, refreshing and retrying once")
                self._tokens.invalidate(credential)
                credential = await self._tokens.get_token()
                resp = await self._send(method, path, params, credential)

        if not resp.is_success:
            body = resp.text
            logger.error(f"Amadeus API error on {method} {path}: {resp.status_code} {body}")
            raise ProviderError(
                f"Amadeus API call failed: {body}",
                status_code=resp.status_code,
                body=body,
            )

        try:
            return response_model.model_validate(resp.json())
        except ValueError as e:
            raise ProviderError(
                f"Amadeus response for {path} could not be decoded: {e}",
                status_code=resp.status_code,
                body=resp.text,
            ) from e

    async def _send(
        self,
        method: str,
        path: str,
        params: dict | None,
        credential: Credential,
    ) -> httpx.Response:
        client = await self._get_client()
        try:
            return await client.request(
                method,
                path,
                params=params,
                headers={"Authorization": f"Bearer {credential.token}"},
            )
        except httpx.RequestError as e:
            raise ProviderError(f"Amadeus request error on {path}: {e}") from e

    @staticmethod
    def _is_token_expired(resp: httpx.Response) -> bool:
        """True if a 401 body carries the expired-token code.

        An unreadable 401 body is itself a failure.
        """
        try:
            body = ProviderErrorBody.model_validate(resp.json())
        except ValueError as e:
            raise ProviderError(
                "Amadeus API call failed with 401",
                status_code=401,
                body=resp.text,
            ) from e
        return any(err.code == EXPIRED_TOKEN_CODE for err in body.errors)

    async def close(self):
        if self._client and self._owns_client:
            await self._client.aclose()
            self._client = None


amadeus_client = AmadeusClient()
