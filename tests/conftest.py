"""
Shared test helpers: a fake TheMealDB upstream served through httpx.MockTransport.

FakeMealDB maps literal endpoint strings ("search.php?s=pasta") to responses and records
every endpoint requested, so tests can assert on exact upstream traffic. A route value can be:
- dict: returned as a 200 JSON body
- int: returned as that HTTP status with an empty body
- str: returned as a 200 body with that raw text (for decode failures)
- Exception: raised from the transport (e.g. httpx.ConnectError)
- list: queued responses, consumed in order; the last one repeats
Unknown endpoints answer {"meals": null}, which is what TheMealDB does for no matches.
"""

from typing import Any, Dict, List, Optional

import httpx
import pytest

from recipe_finder.connectors.mealdb_connector import MealDBConnector
from recipe_finder.recipes import RecipeService
from recipe_finder.utils.cache import ResponseCache

BASE_URL = "https://mealdb.test/api/json/v1/1/"


def make_meal(meal_id: str, name: Optional[str] = None, category: Optional[str] = None,
              area: Optional[str] = None, **extra: Any) -> Dict[str, Any]:
    """Build an upstream meal dict with the keys TheMealDB returns."""
    meal = {
        "idMeal": meal_id,
        "strMeal": name or f"Meal {meal_id}",
        "strMealThumb": f"https://img.test/{meal_id}.jpg",
        "strCategory": category,
        "strArea": area,
        "strInstructions": None,
        "strTags": None,
        "strYoutube": None,
    }
    meal.update(extra)
    return meal


def meals(*meal_ids: str) -> Dict[str, Any]:
    """Build a {"meals": [...]} payload from ids."""
    return {"meals": [make_meal(meal_id) for meal_id in meal_ids]}


class FakeClock:
    """Manually advanced clock for cache expiry tests."""

    def __init__(self, now: float = 1_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeMealDB:
    """Callable MockTransport handler that serves canned TheMealDB responses."""

    def __init__(self, routes: Optional[Dict[str, Any]] = None) -> None:
        self.routes: Dict[str, Any] = dict(routes or {})
        self.requests: List[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        endpoint = str(request.url)[len(BASE_URL):]
        self.requests.append(endpoint)

        response = self.routes.get(endpoint, {"meals": None})
        if isinstance(response, list):
            response = response.pop(0) if len(response) > 1 else response[0]

        if isinstance(response, Exception):
            raise response
        if isinstance(response, int):
            return httpx.Response(response)
        if isinstance(response, str):
            return httpx.Response(200, text=response)
        return httpx.Response(200, json=response)

    def count(self, endpoint: str) -> int:
        return self.requests.count(endpoint)


def build_service(upstream: FakeMealDB, clock: Optional[FakeClock] = None,
                  international_terms: tuple = ()) -> RecipeService:
    """Build a RecipeService whose connector talks to the fake upstream."""
    cache = ResponseCache(clock=clock) if clock is not None else ResponseCache()
    client = httpx.AsyncClient(transport=httpx.MockTransport(upstream))
    connector = MealDBConnector(cache, base_url=BASE_URL, client=client)
    return RecipeService(connector=connector, international_terms=international_terms)


@pytest.fixture
def upstream() -> FakeMealDB:
    return FakeMealDB()


@pytest.fixture
def service(upstream: FakeMealDB) -> RecipeService:
    return build_service(upstream)
