"""Pexels API client — one representative photo per destination query."""

import logging

import httpx

from app.config import settings
from app.exceptions import ProviderError
from app.schemas.images import DestinationImage, PhotoSearchResponse

logger = logging.getLogger(__name__)


class PexelsClient:
    """Adapter for the Pexels photo search API."""

    def __init__(self, *, http_client: httpx.AsyncClient | None = None, api_key: str | None = None):
        self._client = http_client
        self._owns_client = http_client is None
        self._api_key = settings.pexels_api_key if api_key is None else api_key

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=settings.pexels_base_url,
                timeout=15.0,
            )
        return self._client

    async def search_image(self, query: str) -> DestinationImage:
        """Return the first matching photo for ``query``.

        Raises:
            ProviderError: the search failed or returned no photos.
        """
        client = await self._get_client()
        try:
            resp = await client.get(
                "/v1/search",
                params={"query": query, "per_page": 5},
                headers={"Authorization": self._api_key},
            )
            resp.raise_for_status()
            data = PhotoSearchResponse.model_validate(resp.json())
        except httpx.HTTPStatusError as e:
            logger.error(f"Pexels search error: {e.response.status_code}")
            raise ProviderError(
                f"Pexels search failed with status {e.response.status_code}",
                status_code=e.response.status_code,
                body=e.response.text,
            ) from e
        except (httpx.RequestError, ValueError) as e:
            logger.error(f"Pexels request error: {e}")
            raise ProviderError(f"Pexels search failed: {e}") from e

        if not data.photos:
            raise ProviderError("No images found", status_code=404)

        photo = data.photos[0]
        return DestinationImage(url=photo.src.original, alt=photo.alt or query)

    async def close(self):
        if self._client and self._owns_client:
            await self._client.aclose()
            self._client = None


pexels_client = PexelsClient()
