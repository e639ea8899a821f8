"""
TheMealDB connector using httpx.

This connector performs single GET requests against the public TheMealDB JSON API
(https://www.themealdb.com/api/json/v1/1/) and returns the decoded payloads.

The connector:
- Consults the ResponseCache before touching the network (unless the caller bypasses it)
- Issues exactly one request per cache miss; there is no transport-level retry
- Wraps every failure (connection, DNS, timeout, non-2xx status, bad JSON) in TransportError
- Rejects bodies that decode to anything but a JSON object (null, lists, scalars)
- Stores the decoded payload (not the raw bytes) in the cache, keyed by the endpoint string

The httpx.AsyncClient can be injected, which is how tests plug in an httpx.MockTransport.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from recipe_finder.errors import TransportError
from recipe_finder.utils.cache import ResponseCache

from .base import BaseConnector

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://www.themealdb.com/api/json/v1/1/"
DEFAULT_TIMEOUT_SECONDS = 10.0


class MealDBConnector(BaseConnector):
    """
    Connector for TheMealDB.

    Args:
        cache: Response cache shared with the owning service
        base_url: API base URL; endpoints are appended verbatim
        client: Optional pre-built httpx.AsyncClient. When omitted the connector creates
            (and later closes) its own client.
        timeout: Request timeout in seconds for a connector-created client
    """
    source = "themealdb"

    def __init__(
        self,
        cache: ResponseCache,
        base_url: str = DEFAULT_BASE_URL,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self.cache = cache
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=timeout)

    async def fetch(self, endpoint: str, use_cache: bool = True) -> Dict[str, Any]:
        """
        Fetch the decoded payload for an endpoint, using the cache when allowed.

        Args:
            endpoint: Path and query relative to base_url (e.g., "lookup.php?i=52772")
            use_cache: If True, return a fresh cached payload when present and store the
                result on success. If False, always hit the network and leave the cache untouched.

        Returns:
            Decoded JSON payload (e.g., {"meals": [...]})

        Raises:
            TransportError: If the request fails, the status is not 2xx, or the body is not a JSON object
        """
        if use_cache:
            cached = self.cache.get(endpoint)
            if cached is not None:
                logger.debug("Cache hit for %s", endpoint)
                return cached

        url = self.base_url + endpoint
        logger.debug("Requesting %s", url)

        try:
            response = await self.client.get(url)
        except httpx.HTTPError as e:
            raise TransportError(
                f"Failed to fetch {endpoint}: {e.__class__.__name__}: {e}",
                endpoint=endpoint,
            ) from e

        if not response.is_success:
            raise TransportError(
                f"Failed to fetch {endpoint}: HTTP status {response.status_code}",
                endpoint=endpoint,
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise TransportError(
                f"Failed to decode response from {endpoint}: {e}",
                endpoint=endpoint,
                status_code=response.status_code,
            ) from e

        if not isinstance(data, dict):
            raise TransportError(
                f"Unexpected response shape from {endpoint}: expected a JSON object, got {type(data).__name__}",
                endpoint=endpoint,
                status_code=response.status_code,
            )

        if use_cache:
            self.cache.put(endpoint, data)

        return data

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this connector created it."""
        if self._owns_client:
            await self.client.aclose()
