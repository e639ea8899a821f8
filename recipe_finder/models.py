"""
Recipe and category models for the recipe finder.

This module defines the records handed to callers. Upstream payloads from TheMealDB use
flat camel-cased keys (idMeal, strMeal, strIngredient1..20, ...); every fetch path maps
them into RecipeRecord / CategoryRecord via from_upstream() before anything else happens.

Cached entries hold raw upstream payloads, never these models. Each fetch builds
fresh records, and recipe_finder.recipes fills the localized_* fields on every call.

Filter endpoints (filter.php?i=, filter.php?c=) only return idMeal, strMeal and
strMealThumb, so every field except id is optional.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ConfigDict

# TheMealDB exposes numbered ingredient/measure slots 1..MAX_INGREDIENT_SLOTS
MAX_INGREDIENT_SLOTS = 20


class IngredientSlot(BaseModel):
    """One numbered ingredient/measure slot, exactly as returned upstream (untrimmed)."""
    index: int = Field(..., ge=1, le=MAX_INGREDIENT_SLOTS, description="Slot number (1-based)")
    ingredient: Optional[str] = Field(None, description="Ingredient name (may be empty or whitespace)")
    measure: Optional[str] = Field(None, description="Measure text (may be empty or whitespace)")


class RecipeRecord(BaseModel):
    """
    A single recipe (meal) from TheMealDB.

    The localized_category and localized_area fields are None until the record has
    been enriched with Swedish translations.
    """
    id: str = Field(..., description="Upstream meal identifier (idMeal)")
    name: Optional[str] = Field(None, description="Display name (strMeal)")
    thumbnail: Optional[str] = Field(None, description="Thumbnail image URL (strMealThumb)")
    instructions: Optional[str] = Field(None, description="Free-text instructions, newline-delimited steps")
    category: Optional[str] = Field(None, description="Upstream category in English (strCategory)")
    area: Optional[str] = Field(None, description="Upstream area/origin in English (strArea)")
    tags: Optional[str] = Field(None, description="Comma-separated tags (strTags)")
    youtube: Optional[str] = Field(None, description="Video reference URL (strYoutube)")
    source: Optional[str] = Field(None, description="Original recipe source URL (strSource)")
    ingredient_slots: List[IngredientSlot] = Field(default_factory=list, description="Non-null ingredient slots in index order")

    # Enrichment
    localized_category: Optional[str] = Field(None, description="Swedish category name")
    localized_area: Optional[str] = Field(None, description="Swedish area/origin name")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "52772",
                "name": "Teriyaki Chicken Casserole",
                "thumbnail": "https://www.themealdb.com/images/media/meals/wvpsxx1468256321.jpg",
                "instructions": "Preheat oven to 350F.\r\nCombine soy sauce...",
                "category": "Chicken",
                "area": "Japanese",
                "tags": "Meat,Casserole",
                "youtube": "https://www.youtube.com/watch?v=4aZr5hZXP_s",
                "localized_category": "Kyckling",
                "localized_area": "Japansk",
            }
        }
    )

    @classmethod
    def from_upstream(cls, meal: Dict[str, Any]) -> "RecipeRecord":
        """
        Build a record from one entry of an upstream {"meals": [...]} payload.

        The input dict is only read, never mutated or retained.

        Args:
            meal: Upstream meal dictionary (must contain idMeal)

        Returns:
            New RecipeRecord with no enrichment applied
        """
        slots: List[IngredientSlot] = []
        for i in range(1, MAX_INGREDIENT_SLOTS + 1):
            ingredient = meal.get(f"strIngredient{i}")
            measure = meal.get(f"strMeasure{i}")
            if ingredient is None and measure is None:
                continue
            slots.append(IngredientSlot(index=i, ingredient=ingredient, measure=measure))

        return cls(
            id=str(meal.get("idMeal") or ""),
            name=meal.get("strMeal"),
            thumbnail=meal.get("strMealThumb"),
            instructions=meal.get("strInstructions"),
            category=meal.get("strCategory"),
            area=meal.get("strArea"),
            tags=meal.get("strTags"),
            youtube=meal.get("strYoutube"),
            source=meal.get("strSource"),
            ingredient_slots=slots,
        )


class CategoryRecord(BaseModel):
    """A recipe category from categories.php."""
    id: str = Field(..., description="Upstream category identifier (idCategory)")
    name: str = Field(..., description="Category name in English (strCategory)")
    thumbnail: Optional[str] = Field(None, description="Category image URL")
    description: Optional[str] = Field(None, description="Category description")
    localized_name: Optional[str] = Field(None, description="Swedish category name")

    @classmethod
    def from_upstream(cls, category: Dict[str, Any]) -> "CategoryRecord":
        """Build a record from one entry of an upstream {"categories": [...]} payload."""
        return cls(
            id=str(category.get("idCategory") or ""),
            name=category.get("strCategory") or "",
            thumbnail=category.get("strCategoryThumb"),
            description=category.get("strCategoryDescription"),
        )


class FormattedIngredient(BaseModel):
    """An ingredient line ready for display, e.g. {"name": "Soy Sauce", "measure": "3/4 cup", "full": "3/4 cup Soy Sauce"}."""
    name: str
    measure: str = ""
    full: str
