"""
Static translation tables for search terms, categories and areas.

The recipe data comes from TheMealDB, which only understands English terms, while the
audience searches and reads in Swedish. This module holds the lookup tables that bridge
the two:
- SEARCH_SYNONYMS: canonical English search term -> alternates that should also find it
- INGREDIENT_TRANSLATIONS: Swedish ingredient -> English ingredient (for filter queries)
- CATEGORY_TRANSLATIONS / AREA_TRANSLATIONS: English upstream value -> Swedish display value

All lookups fall back to the input unchanged when a key is missing. Nothing here
raises and nothing here holds state.
"""

from typing import Dict, List, Optional

# Canonical term -> alternates. Iteration order is the fallback query order.
SEARCH_SYNONYMS: Dict[str, List[str]] = {
    "pasta": ["spaghetti", "linguine", "macaroni"],
    "chicken": ["poultry", "fowl"],
    "beef": ["steak", "meat"],
    "fish": ["salmon", "tuna", "cod"],
    "soup": ["broth", "stew"],
    "cake": ["dessert", "sweet"],
}

INGREDIENT_TRANSLATIONS: Dict[str, str] = {
    "kyckling": "chicken",
    "nötkött": "beef",
    "fläsk": "pork",
    "fisk": "fish",
    "ris": "rice",
    "pasta": "pasta",
    "potatis": "potato",
    "lök": "onion",
    "vitlök": "garlic",
    "tomat": "tomato",
    "morot": "carrot",
    "citron": "lemon",
}

CATEGORY_TRANSLATIONS: Dict[str, str] = {
    "Beef": "Nötkött",
    "Chicken": "Kyckling",
    "Dessert": "Dessert",
    "Lamb": "Lamm",
    "Pasta": "Pasta",
    "Pork": "Fläsk",
    "Seafood": "Skaldjur",
    "Side": "Tillbehör",
    "Starter": "Förrätt",
    "Vegan": "Vegansk",
    "Vegetarian": "Vegetarisk",
    "Breakfast": "Frukost",
    "Goat": "Get",
}

AREA_TRANSLATIONS: Dict[str, str] = {
    "American": "Amerikansk",
    "British": "Brittisk",
    "Canadian": "Kanadensisk",
    "Chinese": "Kinesisk",
    "Croatian": "Kroatisk",
    "Dutch": "Holländsk",
    "Egyptian": "Egyptisk",
    "French": "Fransk",
    "Greek": "Grekisk",
    "Indian": "Indisk",
    "Irish": "Irländsk",
    "Italian": "Italiensk",
    "Jamaican": "Jamaicansk",
    "Japanese": "Japansk",
    "Kenyan": "Kenyansk",
    "Malaysian": "Malaysisk",
    "Mexican": "Mexikansk",
    "Moroccan": "Marockansk",
    "Polish": "Polsk",
    "Portuguese": "Portugisisk",
    "Russian": "Rysk",
    "Spanish": "Spansk",
    "Thai": "Thailändsk",
    "Tunisian": "Tunisisk",
    "Turkish": "Turkisk",
    "Unknown": "Okänd",
    "Vietnamese": "Vietnamesisk",
    "Lebanese": "Libanesisk",
}


def translate_ingredient(term: str) -> str:
    """
    Translate a normalized (lower-cased, trimmed) ingredient term to English.

    Args:
        term: Ingredient search term, e.g. "kyckling"

    Returns:
        English term if known (e.g. "chicken"), otherwise the input unchanged
    """
    return INGREDIENT_TRANSLATIONS.get(term, term)


def translate_category(category: Optional[str]) -> Optional[str]:
    """Return the Swedish name for an upstream category, or the input unchanged."""
    if not category:
        return category
    return CATEGORY_TRANSLATIONS.get(category, category)


def translate_area(area: Optional[str]) -> Optional[str]:
    """Return the Swedish name for an upstream area/origin, or the input unchanged."""
    if not area:
        return area
    return AREA_TRANSLATIONS.get(area, area)


def find_synonym_matches(term: str) -> List[str]:
    """
    Find canonical search terms whose synonyms overlap the given term.

    A canonical term matches when any of its synonyms is a substring of the term,
    or the term is a substring of one of its synonyms. Matching is plain substring
    containment, so short terms can match more than one entry (e.g. "st" matches
    both "steak" and "stew").

    Args:
        term: Lower-cased, trimmed search term

    Returns:
        Canonical terms in SEARCH_SYNONYMS order

    Examples:
        >>> find_synonym_matches("spaghetti")
        ['pasta']
        >>> find_synonym_matches("salmon fillet")
        ['fish']
    """
    return [
        canonical
        for canonical, synonyms in SEARCH_SYNONYMS.items()
        if any(syn in term or term in syn for syn in synonyms)
    ]
