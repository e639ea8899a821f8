"""
Tests for the TheMealDB connector using an httpx.MockTransport upstream.

These tests verify that:
- Cached payloads are served without network access within the TTL
- Expired entries and cache bypass trigger a new request
- Transport failures, non-2xx statuses, bad JSON and non-object bodies all become TransportError
- Failed requests never populate the cache
"""

import httpx
import pytest

from recipe_finder.connectors.mealdb_connector import DEFAULT_BASE_URL, MealDBConnector
from recipe_finder.errors import RecipeFinderError, TransportError
from recipe_finder.utils.cache import ResponseCache
from conftest import BASE_URL, FakeClock, FakeMealDB, meals


def make_connector(upstream: FakeMealDB, clock: FakeClock = None) -> MealDBConnector:
    cache = ResponseCache(clock=clock) if clock else ResponseCache()
    client = httpx.AsyncClient(transport=httpx.MockTransport(upstream))
    return MealDBConnector(cache, base_url=BASE_URL, client=client)


class TestMealDBConnector:
    """Test cases for MealDBConnector.fetch."""

    def test_defaults(self):
        connector = MealDBConnector(ResponseCache())
        assert connector.source == "themealdb"
        assert connector.base_url == DEFAULT_BASE_URL

    def test_base_url_gets_trailing_slash(self):
        connector = MealDBConnector(ResponseCache(), base_url="https://mealdb.test/api")
        assert connector.base_url == "https://mealdb.test/api/"

    @pytest.mark.asyncio
    async def test_fetch_returns_decoded_payload(self):
        upstream = FakeMealDB({"lookup.php?i=52772": meals("52772")})
        connector = make_connector(upstream)

        data = await connector.fetch("lookup.php?i=52772")

        assert data["meals"][0]["idMeal"] == "52772"
        assert upstream.requests == ["lookup.php?i=52772"]

    @pytest.mark.asyncio
    async def test_cache_hit_within_ttl_skips_network(self):
        """Test that two fetches within the TTL issue one request and a third after expiry issues another."""
        clock = FakeClock()
        upstream = FakeMealDB({"search.php?s=pasta": meals("1", "2")})
        connector = make_connector(upstream, clock)

        first = await connector.fetch("search.php?s=pasta")
        clock.advance(120)
        second = await connector.fetch("search.php?s=pasta")

        assert first == second
        assert upstream.count("search.php?s=pasta") == 1

        clock.advance(300)
        await connector.fetch("search.php?s=pasta")

        assert upstream.count("search.php?s=pasta") == 2

    @pytest.mark.asyncio
    async def test_bypass_always_hits_network_and_does_not_store(self):
        upstream = FakeMealDB({"random.php": meals("7")})
        connector = make_connector(upstream)

        await connector.fetch("random.php", use_cache=False)
        await connector.fetch("random.php", use_cache=False)

        assert upstream.count("random.php") == 2
        assert connector.cache.stats()["count"] == 0

    @pytest.mark.asyncio
    async def test_http_error_status_raises_transport_error(self):
        upstream = FakeMealDB({"categories.php": 503})
        connector = make_connector(upstream)

        with pytest.raises(TransportError) as exc_info:
            await connector.fetch("categories.php")

        assert exc_info.value.status_code == 503
        assert exc_info.value.endpoint == "categories.php"
        assert connector.cache.get("categories.php") is None

    @pytest.mark.asyncio
    async def test_connection_error_is_wrapped(self):
        """Test that httpx transport errors are re-raised as TransportError with the cause chained."""
        upstream = FakeMealDB({"random.php": httpx.ConnectError("connection refused")})
        connector = make_connector(upstream)

        with pytest.raises(TransportError) as exc_info:
            await connector.fetch("random.php")

        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
        assert isinstance(exc_info.value, RecipeFinderError)

    @pytest.mark.asyncio
    async def test_timeout_is_wrapped(self):
        upstream = FakeMealDB({"random.php": httpx.ReadTimeout("timed out")})
        connector = make_connector(upstream)

        with pytest.raises(TransportError):
            await connector.fetch("random.php")

    @pytest.mark.asyncio
    async def test_invalid_json_is_wrapped(self):
        upstream = FakeMealDB({"search.php?s=pasta": "<html>not json</html>"})
        connector = make_connector(upstream)

        with pytest.raises(TransportError, match="decode"):
            await connector.fetch("search.php?s=pasta")

        assert connector.cache.get("search.php?s=pasta") is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", ["[1, 2]", '"pasta"', "42"])
    async def test_non_object_body_is_rejected(self, body):
        upstream = FakeMealDB({"search.php?s=pasta": body})
        connector = make_connector(upstream)

        with pytest.raises(TransportError, match="Unexpected response shape") as exc_info:
            await connector.fetch("search.php?s=pasta")

        assert exc_info.value.status_code == 200
        assert connector.cache.stats()["count"] == 0

    @pytest.mark.asyncio
    async def test_null_body_is_never_cached(self):
        """Test that a literal null body fails every time instead of being stored as a miss."""
        upstream = FakeMealDB({"lookup.php?i=52772": "null"})
        connector = make_connector(upstream)

        for _ in range(2):
            with pytest.raises(TransportError):
                await connector.fetch("lookup.php?i=52772")

        assert connector.cache.stats()["count"] == 0
        assert upstream.count("lookup.php?i=52772") == 2

    @pytest.mark.asyncio
    async def test_aclose_leaves_injected_client_open(self):
        client = httpx.AsyncClient(transport=httpx.MockTransport(FakeMealDB()))
        connector = MealDBConnector(ResponseCache(), base_url=BASE_URL, client=client)

        await connector.aclose()

        assert not client.is_closed
        await client.aclose()

    @pytest.mark.asyncio
    async def test_aclose_closes_own_client(self):
        connector = MealDBConnector(ResponseCache())

        await connector.aclose()

        assert connector.client.is_closed
