"""
FastAPI application for the Recipe Finder API.

This module defines the REST API endpoints that front-ends use to discover recipes:
- GET /recipes/search: Search recipes by name (with synonym fallback) or by ingredient
- GET /recipes/random: Random recipes (carousel)
- GET /recipes/daily: Random recipes for the start page, never failing
- GET /recipes/international: Aggregated recipes across the configured search terms
- GET /recipes/by-name/{name}: Full details of the first recipe matching a name
- GET /recipes/{recipe_id}: Full details of one recipe
- GET /categories, GET /categories/{category}/recipes: Category browsing
- GET /cache/stats, DELETE /cache: Response cache diagnostics

A single RecipeService is built at startup (lifespan) and stored on app.state. Routes get it
through the get_recipe_service dependency, which tests override with their own service.

Error mapping:
- ValidationError -> 400
- TransportError -> 502 (upstream detail is logged, not returned)

Run the API with:
    uvicorn api.main:app --reload
"""

# Import config early to load .env file before any other code accesses environment variables
from api.config import MealDBConfig, configure_logging

import logging
import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Path, Query, Request, status

from api.schemas import (
    CacheStatsResponse,
    CategoryListResponse,
    HealthResponse,
    RecipeDetailResponse,
    RecipeListResponse,
)
from recipe_finder.errors import TransportError, ValidationError
from recipe_finder.ingredients import get_formatted_ingredients, split_instructions
from recipe_finder.models import RecipeRecord
from recipe_finder.recipes import SEARCH_TYPES, RecipeService

logger = logging.getLogger(__name__)

API_NAME = "Recipe Finder API"
API_VERSION = "1.0.0"
API_DESCRIPTION = "Recipe discovery on top of TheMealDB with caching, synonym search and Swedish localization"

# Track app start time for uptime calculation
_APP_START_TIME = time.time()


def build_recipe_service() -> RecipeService:
    """Create the application's RecipeService from environment configuration."""
    return RecipeService.create(
        base_url=MealDBConfig.get_base_url(),
        timeout=MealDBConfig.get_timeout_seconds(),
        cache_ttl_seconds=MealDBConfig.get_cache_ttl_seconds(),
        international_terms=MealDBConfig.get_international_terms(),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    app.state.recipe_service = build_recipe_service()
    logger.info("Recipe service started (base_url=%s)", MealDBConfig.get_base_url())
    try:
        yield
    finally:
        await app.state.recipe_service.aclose()


app = FastAPI(
    title=API_NAME,
    description=API_DESCRIPTION,
    version=API_VERSION,
    lifespan=lifespan,
    openapi_tags=[
        {"name": "recipes", "description": "Search, browse and look up recipes."},
        {"name": "categories", "description": "Recipe categories with Swedish names."},
        {"name": "diagnostics", "description": "Health check and response cache diagnostics."},
    ],
)


def get_recipe_service(request: Request) -> RecipeService:
    """Dependency returning the RecipeService built at startup."""
    return request.app.state.recipe_service


def _bad_request(error: ValidationError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))


def _upstream_error(error: TransportError) -> HTTPException:
    logger.error("Upstream request failed (endpoint=%s status=%s): %s", error.endpoint, error.status_code, error)
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail="The recipe service is currently unavailable. Please try again later.",
    )


def _detail_response(recipe: RecipeRecord) -> RecipeDetailResponse:
    return RecipeDetailResponse(
        recipe=recipe,
        ingredients=get_formatted_ingredients(recipe),
        steps=split_instructions(recipe.instructions),
    )


@app.get(
    "/recipes/search",
    response_model=RecipeListResponse,
    tags=["recipes"],
    summary="Search recipes by name or ingredient",
)
async def search_recipes(
    q: str = Query(..., description="Search term (at least 2 characters), e.g. 'pasta' or 'kyckling'"),
    type: str = Query("name", description=f"Search type: {', '.join(SEARCH_TYPES)}"),
    service: RecipeService = Depends(get_recipe_service),
) -> RecipeListResponse:
    """
    Search recipes.

    Name searches fall back to synonyms when few results are found and never fail on
    upstream errors. Ingredient searches translate Swedish terms to English and report
    upstream errors as 502.

    Example:
        ```bash
        GET /recipes/search?q=kyckling&type=ingredient
        ```
    """
    try:
        recipes = await service.search(q, search_type=type)
    except ValidationError as e:
        raise _bad_request(e) from e
    except TransportError as e:
        raise _upstream_error(e) from e
    return RecipeListResponse.from_recipes(recipes)


@app.get("/recipes/random", response_model=RecipeListResponse, tags=["recipes"])
async def random_recipes(
    count: int = Query(6, ge=1, le=24, description="Number of unique random recipes (1-24)"),
    service: RecipeService = Depends(get_recipe_service),
) -> RecipeListResponse:
    """Random recipes with distinct ids; may return fewer than requested."""
    recipes = await service.get_random_recipes(count)
    return RecipeListResponse.from_recipes(recipes)


@app.get("/recipes/daily", response_model=RecipeListResponse, tags=["recipes"])
async def daily_recipes(service: RecipeService = Depends(get_recipe_service)) -> RecipeListResponse:
    """Six random recipes for the start page. Upstream failures yield an empty list."""
    recipes = await service.get_daily_recipes()
    return RecipeListResponse.from_recipes(recipes)


@app.get("/recipes/international", response_model=RecipeListResponse, tags=["recipes"])
async def international_recipes(
    limit: int = Query(100, ge=1, le=200, description="Maximum number of recipes (1-200)"),
    service: RecipeService = Depends(get_recipe_service),
) -> RecipeListResponse:
    """Recipes aggregated over the configured search terms, deduplicated and capped at limit."""
    recipes = await service.get_international_recipes(limit)
    return RecipeListResponse.from_recipes(recipes)


@app.get("/recipes/by-name/{name}", response_model=RecipeDetailResponse, tags=["recipes"])
async def recipe_by_name(
    name: str = Path(..., description="Recipe name to search for"),
    service: RecipeService = Depends(get_recipe_service),
) -> RecipeDetailResponse:
    """Full details of the first recipe whose name matches."""
    try:
        recipe = await service.get_recipe_details_by_name(name)
    except ValidationError as e:
        raise _bad_request(e) from e
    except TransportError as e:
        raise _upstream_error(e) from e

    if recipe is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"No recipe found for '{name}'")
    return _detail_response(recipe)


@app.get("/recipes/{recipe_id}", response_model=RecipeDetailResponse, tags=["recipes"])
async def recipe_by_id(
    recipe_id: str = Path(..., description="TheMealDB meal id, e.g. 52772"),
    service: RecipeService = Depends(get_recipe_service),
) -> RecipeDetailResponse:
    """Full details of one recipe, with formatted ingredients and instruction steps."""
    try:
        recipe = await service.get_recipe_by_id(recipe_id)
    except ValidationError as e:
        raise _bad_request(e) from e
    except TransportError as e:
        raise _upstream_error(e) from e

    if recipe is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Recipe '{recipe_id}' not found")
    return _detail_response(recipe)


@app.get("/categories", response_model=CategoryListResponse, tags=["categories"])
async def categories(service: RecipeService = Depends(get_recipe_service)) -> CategoryListResponse:
    """All categories with their Swedish names."""
    try:
        items = await service.get_categories()
    except TransportError as e:
        raise _upstream_error(e) from e
    return CategoryListResponse(count=len(items), categories=items)


@app.get("/categories/{category}/recipes", response_model=RecipeListResponse, tags=["categories"])
async def category_recipes(
    category: str = Path(..., description="Exact category name, e.g. Seafood"),
    service: RecipeService = Depends(get_recipe_service),
) -> RecipeListResponse:
    """Recipes in a category, each tagged with the category's Swedish name."""
    try:
        recipes = await service.get_recipes_by_category(category)
    except ValidationError as e:
        raise _bad_request(e) from e
    except TransportError as e:
        raise _upstream_error(e) from e
    return RecipeListResponse.from_recipes(recipes)


@app.get("/cache/stats", response_model=CacheStatsResponse, tags=["diagnostics"])
def cache_stats(service: RecipeService = Depends(get_recipe_service)) -> CacheStatsResponse:
    """Count, keys and ages of cached upstream responses."""
    return CacheStatsResponse(**service.cache_stats(), ttl_seconds=service.cache.ttl_seconds)


@app.delete("/cache", tags=["diagnostics"])
def clear_cache(service: RecipeService = Depends(get_recipe_service)) -> dict:
    """Drop all cached upstream responses."""
    service.clear_cache()
    return {"status": "ok", "cleared": True}


@app.get("/health", response_model=HealthResponse, tags=["diagnostics"])
def health(service: RecipeService = Depends(get_recipe_service)) -> HealthResponse:
    """
    Health check endpoint for monitoring and status checks.

    Always returns 200 OK if the endpoint is reachable; it does not call upstream.
    """
    return HealthResponse(
        status="ok",
        name=API_NAME,
        version=API_VERSION,
        uptime_seconds=int(time.time() - _APP_START_TIME),
        cache_entries=len(service.cache),
    )


@app.get("/")
def root() -> dict:
    """
    Root endpoint providing API information.

    Returns:
        Dictionary with API name and version
    """
    return {
        "name": API_NAME,
        "version": API_VERSION,
        "description": API_DESCRIPTION,
        "docs": "/docs",
    }
