"""
Ingredient and instruction formatting helpers.

Pure helpers with no I/O: they turn a recipe's numbered ingredient/measure slots into
display lines and split free-text instructions into steps.
"""

import re
from typing import Any, Dict, List, Optional, Union

from recipe_finder.models import MAX_INGREDIENT_SLOTS, FormattedIngredient, RecipeRecord

_STEP_SPLIT = re.compile(r"\r?\n")


def _slot_pairs(recipe: Union[RecipeRecord, Dict[str, Any]]) -> List[tuple]:
    """Return (ingredient, measure) pairs for slots 1..20 in index order."""
    if isinstance(recipe, RecipeRecord):
        by_index = {slot.index: slot for slot in recipe.ingredient_slots}
        return [
            (by_index[i].ingredient, by_index[i].measure) if i in by_index else (None, None)
            for i in range(1, MAX_INGREDIENT_SLOTS + 1)
        ]
    return [
        (recipe.get(f"strIngredient{i}"), recipe.get(f"strMeasure{i}"))
        for i in range(1, MAX_INGREDIENT_SLOTS + 1)
    ]


def get_formatted_ingredients(
    recipe: Optional[Union[RecipeRecord, Dict[str, Any]]],
) -> List[FormattedIngredient]:
    """
    Extract the populated ingredient slots of a recipe as display lines.

    A slot is included only if its ingredient is non-empty after trimming. The full
    line is "<measure> <ingredient>" when a measure is present, else just the ingredient.

    Args:
        recipe: RecipeRecord, raw upstream meal dict, or None

    Returns:
        FormattedIngredient list in slot order (empty for None)

    Examples:
        >>> get_formatted_ingredients({"strIngredient1": "Rice ", "strMeasure1": "1 cup"})[0].full
        '1 cup Rice'
    """
    if not recipe:
        return []

    ingredients: List[FormattedIngredient] = []
    for ingredient, measure in _slot_pairs(recipe):
        name = (ingredient or "").strip()
        if not name:
            continue
        measure_text = (measure or "").strip()
        ingredients.append(
            FormattedIngredient(
                name=name,
                measure=measure_text,
                full=f"{measure_text} {name}" if measure_text else name,
            )
        )
    return ingredients


def split_instructions(instructions: Optional[str]) -> List[str]:
    """
    Split newline-delimited instructions into steps, dropping blank lines.

    Args:
        instructions: Instruction text (strInstructions), may be None

    Returns:
        List of non-blank steps in original order, each as written upstream
    """
    if not instructions:
        return []
    return [step for step in _STEP_SPLIT.split(instructions) if step.strip()]
