"""
Recipe query operations on top of TheMealDB connector.

This module provides RecipeService, the entry point used by the API layer. It:
- Validates caller input before any upstream request (ValidationError)
- Builds the upstream endpoint strings (search.php?s=, filter.php?i=, ...)
- Falls back to synonym searches when a name search under-returns
- Translates Swedish ingredient terms before filtering
- Samples random recipes under an attempt budget
- Aggregates several name searches into one deduplicated, capped list
- Enriches every returned record with Swedish category/area names

Error policy is deliberately asymmetric:
- Swallowed and logged: primary and fallback name searches, individual random attempts,
  per-term aggregation failures, daily recipes. Partial results are a valid outcome there.
- Propagated: ingredient search, lookup by id, categories, category filter. There is no
  second source of results, so the failure must reach the caller.

Search flow: FastAPI route -> RecipeService -> MealDBConnector.fetch() -> ResponseCache / TheMealDB
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence
from urllib.parse import quote

from recipe_finder.connectors.base import BaseConnector
from recipe_finder.connectors.mealdb_connector import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_SECONDS, MealDBConnector
from recipe_finder.errors import RecipeFinderError, TransportError, ValidationError
from recipe_finder.models import CategoryRecord, RecipeRecord
from recipe_finder.translations import (
    find_synonym_matches,
    translate_area,
    translate_category,
    translate_ingredient,
)
from recipe_finder.utils.cache import DEFAULT_CACHE_TTL_SECONDS, ResponseCache

logger = logging.getLogger(__name__)

# Search terms shorter than this are rejected
MIN_TERM_LENGTH = 2

# A name search returning fewer results than this triggers synonym fallback
SYNONYM_FALLBACK_THRESHOLD = 3

# Random sampling may spend at most count * RANDOM_ATTEMPT_FACTOR fetches
RANDOM_ATTEMPT_FACTOR = 3

SEARCH_TYPES = ("name", "ingredient")


def _encode(value: str) -> str:
    """Percent-encode a query value the way browsers' encodeURIComponent does."""
    return quote(value, safe="!~*'()")


def _normalize_term(term: Optional[str], label: str) -> str:
    """Trim and lower-case a search term, raising ValidationError if it is too short."""
    normalized = (term or "").strip().lower()
    if len(normalized) < MIN_TERM_LENGTH:
        raise ValidationError(f"{label} must be at least {MIN_TERM_LENGTH} characters long")
    return normalized


def _meals(payload: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Return the meals list from an upstream payload; TheMealDB uses null for no matches."""
    if not payload:
        return []
    meals = payload.get("meals")
    if not isinstance(meals, list):
        return []
    return [meal for meal in meals if isinstance(meal, dict)]


def _recipes(payload: Optional[Dict[str, Any]], category: Optional[str] = None) -> List[RecipeRecord]:
    """
    Build enriched records from an upstream payload.

    Meals without an idMeal are dropped, since every later step identifies recipes by id.

    Args:
        payload: Decoded upstream payload
        category: Requested category to localize instead of each record's own
    """
    recipes: List[RecipeRecord] = []
    for meal in _meals(payload):
        if not meal.get("idMeal"):
            logger.warning("Dropping upstream meal without idMeal: %s", str(meal)[:200])
            continue
        recipes.append(enrich_recipe(RecipeRecord.from_upstream(meal), category=category))
    return recipes


def enrich_recipe(recipe: RecipeRecord, category: Optional[str] = None) -> RecipeRecord:
    """
    Attach Swedish category and area names to a recipe.

    Args:
        recipe: Record to enrich (modified in place)
        category: Category to localize instead of recipe.category (used when the
            category is known from the request rather than the record)

    Returns:
        The same record, for chaining
    """
    recipe.localized_category = translate_category(category if category is not None else recipe.category)
    recipe.localized_area = translate_area(recipe.area)
    return recipe


def _dedupe_by_id(recipes: Iterable[RecipeRecord]) -> List[RecipeRecord]:
    """Drop records whose id was already seen, keeping first-seen order."""
    seen = set()
    unique: List[RecipeRecord] = []
    for recipe in recipes:
        if recipe.id in seen:
            continue
        seen.add(recipe.id)
        unique.append(recipe)
    return unique


class RecipeService:
    """
    Query operations against TheMealDB with caching, fallback and localization.

    The service owns its ResponseCache and connector; construct one at startup and
    pass it to whatever needs it. Tests construct their own with a fake connector or
    an httpx.MockTransport-backed client.

    Args:
        connector: Upstream connector. Defaults to a MealDBConnector over a new cache.
        cache: Cache to use when the default connector is built
        international_terms: Ordered search terms used by get_international_recipes()
    """

    def __init__(
        self,
        connector: Optional[BaseConnector] = None,
        cache: Optional[ResponseCache] = None,
        international_terms: Sequence[str] = (),
    ) -> None:
        if cache is None:
            cache = getattr(connector, "cache", None)
        self.cache = cache if cache is not None else ResponseCache()
        self.connector = connector if connector is not None else MealDBConnector(self.cache)
        self.international_terms = list(international_terms)

    @classmethod
    def create(
        cls,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        cache_ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS,
        international_terms: Sequence[str] = (),
    ) -> "RecipeService":
        """Build a service with a fresh cache and a TheMealDB connector."""
        cache = ResponseCache(ttl_seconds=cache_ttl_seconds)
        connector = MealDBConnector(cache, base_url=base_url, timeout=timeout)
        return cls(connector=connector, cache=cache, international_terms=international_terms)

    async def __aenter__(self) -> "RecipeService":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Release the connector's network resources."""
        await self.connector.aclose()

    async def search_by_name(self, name: Optional[str]) -> List[RecipeRecord]:
        """
        Search recipes by name, with synonym fallback when few results come back.

        Upstream failures are logged and swallowed: a failed primary search can still be
        rescued by the synonym searches, and a failed synonym search only means fewer results.

        Args:
            name: Search term (at least 2 characters after trimming)

        Returns:
            Primary results in upstream order, followed by fallback results not already
            present (by id). Possibly empty. Records are enriched.

        Raises:
            ValidationError: If the term is missing or too short
        """
        term = _normalize_term(name, "Search term")
        logger.info("Name search: term=%r", term)

        results: List[RecipeRecord] = []
        try:
            payload = await self.connector.fetch(f"search.php?s={_encode(term)}")
            results = _recipes(payload)
        except TransportError as e:
            logger.warning("Name search for %r failed: %s", term, e)

        if len(results) >= SYNONYM_FALLBACK_THRESHOLD:
            return results

        seen_ids = {recipe.id for recipe in results}
        for canonical in find_synonym_matches(term):
            logger.debug("Synonym fallback: %r -> %r", term, canonical)
            try:
                payload = await self.connector.fetch(f"search.php?s={_encode(canonical)}")
            except TransportError as e:
                logger.warning("Synonym search for %r failed: %s", canonical, e)
                continue

            for recipe in _recipes(payload):
                if recipe.id not in seen_ids:
                    seen_ids.add(recipe.id)
                    results.append(recipe)

        logger.info("Name search for %r returned %d recipes", term, len(results))
        return results

    async def search_by_ingredient(self, ingredient: Optional[str]) -> List[RecipeRecord]:
        """
        Search recipes containing an ingredient; Swedish terms are translated first.

        Args:
            ingredient: Ingredient (at least 2 characters after trimming), e.g. "kyckling"

        Returns:
            Partial recipe records (id, name, thumbnail) from filter.php, enriched

        Raises:
            ValidationError: If the term is missing or too short
            TransportError: If the upstream request fails
        """
        term = translate_ingredient(_normalize_term(ingredient, "Ingredient"))
        logger.info("Ingredient search: term=%r", term)
        payload = await self.connector.fetch(f"filter.php?i={_encode(term)}")
        return _recipes(payload)

    async def search(self, query: Optional[str], search_type: str = "name") -> List[RecipeRecord]:
        """
        Dispatch a search by type ("name" or "ingredient").

        Raises:
            ValidationError: If search_type is unknown or the query is invalid
            TransportError: Propagated from ingredient search
        """
        if search_type == "name":
            return await self.search_by_name(query)
        if search_type == "ingredient":
            return await self.search_by_ingredient(query)
        raise ValidationError(f"Unknown search type '{search_type}'. Valid types: {', '.join(SEARCH_TYPES)}")

    async def get_recipe_by_id(self, recipe_id: Any) -> Optional[RecipeRecord]:
        """
        Look up a full recipe by id.

        Args:
            recipe_id: Upstream meal id, e.g. "52772"

        Returns:
            Enriched RecipeRecord, or None if no recipe has this id

        Raises:
            ValidationError: If the id is missing or empty
            TransportError: If the upstream request fails
        """
        if recipe_id is None or not str(recipe_id).strip():
            raise ValidationError("Recipe id is required")

        payload = await self.connector.fetch(f"lookup.php?i={_encode(str(recipe_id).strip())}")
        recipes = _recipes(payload)
        return recipes[0] if recipes else None

    async def get_recipe_details_by_name(self, name: Optional[str]) -> Optional[RecipeRecord]:
        """
        Find a recipe by name and return its full details.

        Uses the first name-search hit and looks it up by id, since search results
        from the fallback path may be partial.

        Returns:
            Enriched RecipeRecord, or None if the name search found nothing
        """
        recipes = await self.search_by_name(name)
        if not recipes:
            return None
        return await self.get_recipe_by_id(recipes[0].id)

    async def get_random_recipes(self, count: int = 1) -> List[RecipeRecord]:
        """
        Sample unique random recipes, bypassing the cache.

        Every attempt (successful, duplicate, empty or failed) consumes one unit of a
        budget of count * 3 attempts. Returning fewer than count recipes is not an error.

        Args:
            count: Number of unique recipes wanted

        Returns:
            Up to count enriched recipes with distinct ids
        """
        recipes: List[RecipeRecord] = []
        seen_ids = set()
        max_attempts = count * RANDOM_ATTEMPT_FACTOR
        attempts = 0

        while len(recipes) < count and attempts < max_attempts:
            attempts += 1
            try:
                payload = await self.connector.fetch("random.php", use_cache=False)
            except TransportError as e:
                logger.warning("Random recipe attempt %d failed: %s", attempts, e)
                continue

            sampled = _recipes(payload)
            if not sampled:
                continue

            recipe = sampled[0]
            if recipe.id in seen_ids:
                logger.debug("Discarding duplicate random recipe %s", recipe.id)
                continue
            seen_ids.add(recipe.id)
            recipes.append(recipe)

        if len(recipes) < count:
            logger.info("Random sampling returned %d of %d recipes after %d attempts", len(recipes), count, attempts)
        return recipes

    async def get_daily_recipes(self, count: int = 6) -> List[RecipeRecord]:
        """Random recipes for the start page; any failure degrades to an empty list."""
        try:
            return await self.get_random_recipes(count)
        except RecipeFinderError as e:
            logger.error("Failed to load daily recipes: %s", e)
            return []

    async def get_international_recipes(self, limit: int = 100) -> List[RecipeRecord]:
        """
        Aggregate name searches over the configured terms into one recipe list.

        Terms are searched in order until at least limit recipes have been collected;
        remaining terms are not queried. A term whose search raises contributes nothing.

        Args:
            limit: Maximum number of recipes to return

        Returns:
            Up to limit enriched recipes with distinct ids, in first-seen order
        """
        all_recipes: List[RecipeRecord] = []

        for term in self.international_terms:
            if len(all_recipes) >= limit:
                break
            try:
                recipes = await self.search_by_name(term)
            except RecipeFinderError as e:
                logger.warning("International search for %r failed: %s", term, e)
                continue
            all_recipes.extend(recipes)

        return _dedupe_by_id(all_recipes)[:limit]

    async def get_categories(self) -> List[CategoryRecord]:
        """
        List all recipe categories with Swedish names.

        Raises:
            TransportError: If the upstream request fails
        """
        payload = await self.connector.fetch("categories.php")
        raw_categories = (payload or {}).get("categories")
        if not isinstance(raw_categories, list):
            raw_categories = []
        categories = [CategoryRecord.from_upstream(c) for c in raw_categories if isinstance(c, dict)]
        for category in categories:
            category.localized_name = translate_category(category.name)
        return categories

    async def get_recipes_by_category(self, category: Optional[str]) -> List[RecipeRecord]:
        """
        List recipes in a category.

        The requested category's translation is attached to every record, since
        filter results do not carry a category of their own.

        Args:
            category: Exact upstream category name, e.g. "Seafood"

        Raises:
            ValidationError: If category is empty
            TransportError: If the upstream request fails
        """
        if not category:
            raise ValidationError("Category is required")

        payload = await self.connector.fetch(f"filter.php?c={_encode(category)}")
        return _recipes(payload, category=category)

    def clear_cache(self) -> None:
        """Drop all cached upstream responses."""
        self.cache.clear()
        logger.info("Response cache cleared")

    def cache_stats(self) -> Dict[str, Any]:
        """Return count, keys and ages of cached responses."""
        return self.cache.stats()
