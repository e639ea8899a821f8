"""
Configuration management for the Recipe Finder API.

This module centralizes environment variable loading from the .env file at project root.
It should be imported early (api/main.py does this) so .env is loaded before any other
code reads environment variables.

In production .env will usually not exist; load_dotenv() then does nothing and the
platform's environment variables are used.

Environment Variables:
- MEALDB_BASE_URL: Optional, defaults to "https://www.themealdb.com/api/json/v1/1/"
- MEALDB_TIMEOUT_SECONDS: Optional, request timeout (default: 10)
- RECIPE_CACHE_TTL_SECONDS: Optional, response cache TTL (default: 300)
- INTERNATIONAL_SEARCH_TERMS: Optional, comma-separated terms for /recipes/international
- LOG_LEVEL: Optional, logging level name (default: "INFO")
"""

import logging
import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv

from recipe_finder.connectors.mealdb_connector import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_SECONDS
from recipe_finder.utils.cache import DEFAULT_CACHE_TTL_SECONDS

# Dishes and staples that together cover most of TheMealDB's areas
DEFAULT_INTERNATIONAL_TERMS = [
    "chicken",
    "beef",
    "pasta",
    "fish",
    "curry",
    "soup",
    "rice",
    "pork",
    "lamb",
    "salad",
    "pie",
    "cake",
    "noodle",
    "stew",
    "tart",
]


def load_env_file() -> None:
    """
    Load environment variables from .env file at project root.

    Safe to call multiple times. Existing environment variables take precedence
    over values in .env (override=False).
    """
    # api/config.py -> api/ -> project root
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env", override=False)


# Load .env file on module import
load_env_file()


def _get_float(name: str, default: float) -> float:
    """Read a float environment variable, raising RuntimeError if it is not a number."""
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError as e:
        raise RuntimeError(f"{name} must be a number, got {value!r}") from e


class MealDBConfig:
    """Configuration for the TheMealDB connector and recipe service."""

    @staticmethod
    def get_base_url() -> str:
        """
        Get TheMealDB base URL.

        Returns:
            Base URL with a trailing slash (default: TheMealDB v1 with the public test key)
        """
        url = os.getenv("MEALDB_BASE_URL", DEFAULT_BASE_URL)
        return url if url.endswith("/") else url + "/"

    @staticmethod
    def get_timeout_seconds() -> float:
        """Get the upstream request timeout in seconds (default: 10)."""
        return _get_float("MEALDB_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS)

    @staticmethod
    def get_cache_ttl_seconds() -> float:
        """Get the response cache TTL in seconds (default: 300)."""
        return _get_float("RECIPE_CACHE_TTL_SECONDS", DEFAULT_CACHE_TTL_SECONDS)

    @staticmethod
    def get_international_terms() -> List[str]:
        """
        Get the ordered search terms used for international recipe aggregation.

        Returns:
            Terms from INTERNATIONAL_SEARCH_TERMS (comma-separated), or the default list
        """
        raw = os.getenv("INTERNATIONAL_SEARCH_TERMS")
        if not raw:
            return list(DEFAULT_INTERNATIONAL_TERMS)
        return [term.strip() for term in raw.split(",") if term.strip()]


def get_log_level() -> str:
    """Get the log level name from LOG_LEVEL (default: "INFO")."""
    return os.getenv("LOG_LEVEL", "INFO").upper()


def configure_logging() -> None:
    """Configure root logging once, using LOG_LEVEL."""
    logging.basicConfig(
        level=getattr(logging, get_log_level(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
