"""
Pydantic schemas for FastAPI responses.

This module defines the response models of the Recipe Finder API. Recipe and category
records come straight from recipe_finder.models; the schemas here wrap them into
response envelopes and add the display helpers (formatted ingredients, instruction steps)
for the detail view.
"""

from typing import List

from pydantic import BaseModel, Field, ConfigDict

from recipe_finder.models import CategoryRecord, FormattedIngredient, RecipeRecord


class RecipeListResponse(BaseModel):
    """A list of recipes with its length."""
    count: int = Field(..., ge=0, description="Number of recipes returned")
    results: List[RecipeRecord] = Field(..., description="Recipes in result order")

    @classmethod
    def from_recipes(cls, recipes: List[RecipeRecord]) -> "RecipeListResponse":
        return cls(count=len(recipes), results=recipes)


class RecipeDetailResponse(BaseModel):
    """
    A single recipe with display helpers for the detail view.

    ingredients and steps are derived from the recipe's ingredient slots and instructions.
    """
    recipe: RecipeRecord
    ingredients: List[FormattedIngredient] = Field(default_factory=list, description="Populated ingredient lines in slot order")
    steps: List[str] = Field(default_factory=list, description="Non-blank instruction steps")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "recipe": {"id": "52772", "name": "Teriyaki Chicken Casserole", "localized_category": "Kyckling"},
                "ingredients": [{"name": "soy sauce", "measure": "3/4 cup", "full": "3/4 cup soy sauce"}],
                "steps": ["Preheat oven to 350° F."],
            }
        }
    )


class CategoryListResponse(BaseModel):
    """All recipe categories."""
    count: int = Field(..., ge=0)
    categories: List[CategoryRecord]


class CacheStatsResponse(BaseModel):
    """Diagnostics for the response cache."""
    count: int = Field(..., ge=0, description="Number of stored entries (expired included)")
    keys: List[str] = Field(default_factory=list, description="Cached endpoint strings in insertion order")
    ages: List[float] = Field(default_factory=list, description="Seconds since each entry was stored")
    ttl_seconds: float = Field(..., description="Entry lifetime in seconds")


class HealthResponse(BaseModel):
    """Health check payload."""
    status: str
    name: str
    version: str
    uptime_seconds: int
    cache_entries: int
