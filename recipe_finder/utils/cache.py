"""
In-process TTL cache for upstream responses.

This module provides a simple, lightweight cache for decoded TheMealDB payloads to
avoid re-fetching the same endpoint while keeping results fresh.

The cache is in-memory and owned by whoever constructs it (one per RecipeService),
with expiration based on TTL:
- Keys are the literal endpoint string ("search.php?s=pasta"); no canonicalization,
  so differently ordered query parameters are different entries.
- Expired entries are treated as missing but are only replaced when overwritten.
- No size bound and no LRU eviction.
- Stored payloads are JSON objects, never None, so get() returning None always means a miss.

Not safe for concurrent mutation from multiple threads. Interleaved coroutines on a
single event loop are fine since get/put never await.
"""

import time
from typing import Any, Callable, Dict, List, Optional, Tuple

# TTL in seconds - 5 minutes
DEFAULT_CACHE_TTL_SECONDS = 5 * 60


class ResponseCache:
    """
    Key -> (timestamp, payload) store with per-entry expiration.

    Args:
        ttl_seconds: How long an entry stays valid after it was stored
        clock: Callable returning the current time in seconds (injectable for tests)
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        # Key -> (timestamp, cached_value)
        self._entries: Dict[str, Tuple[float, Any]] = {}

    def get(self, key: str) -> Optional[Any]:
        """
        Retrieve a cached payload if it exists and hasn't expired.

        Args:
            key: Endpoint string used when the payload was stored

        Returns:
            Cached payload, or None if not found or expired
        """
        entry = self._entries.get(key)
        if entry is None:
            return None

        timestamp, value = entry
        if self._clock() - timestamp >= self.ttl_seconds:
            return None

        return value

    def put(self, key: str, value: Any) -> None:
        """Store a payload, overwriting any existing entry for the key."""
        self._entries[key] = (self._clock(), value)

    def clear(self) -> None:
        """Clear all cached payloads."""
        self._entries.clear()

    def stats(self) -> Dict[str, Any]:
        """
        Get cache statistics for diagnostics.

        Returns:
            Dictionary with:
            - count: Number of stored entries (expired entries included)
            - keys: Stored keys in insertion order
            - ages: Seconds since each entry was stored, aligned with keys
        """
        now = self._clock()
        keys: List[str] = list(self._entries.keys())
        ages = [round(now - self._entries[key][0], 3) for key in keys]
        return {
            "count": len(keys),
            "keys": keys,
            "ages": ages,
        }

    def __len__(self) -> int:
        return len(self._entries)
