"""
Base connector abstract class for upstream recipe sources.

This module defines the abstract base class that upstream connectors implement.
It keeps the query layer (recipe_finder.recipes) independent of how a payload is
actually obtained, so a different source or a fake can be swapped in.

All connectors must:
- Implement the source attribute (e.g., "themealdb")
- Provide an async fetch method returning the decoded payload for an endpoint
- Raise TransportError (and only TransportError) when the payload cannot be obtained
"""

from abc import ABC, abstractmethod
from typing import Any, Dict


class BaseConnector(ABC):
    """
    Abstract base class for all upstream connectors.

    Attributes:
        source: String identifier for the upstream source (e.g., "themealdb")
    """
    source: str

    @abstractmethod
    async def fetch(self, endpoint: str, use_cache: bool = True) -> Dict[str, Any]:
        """
        Fetch and decode the payload for an endpoint.

        Args:
            endpoint: Path and query relative to the source's base URL (e.g., "search.php?s=pasta")
            use_cache: Whether a cached payload may be returned and the result stored

        Returns:
            Decoded JSON payload

        Raises:
            TransportError: If the request fails, returns a non-2xx status, or cannot be decoded
        """
        pass

    async def aclose(self) -> None:
        """Release any network resources held by the connector."""
        return None
