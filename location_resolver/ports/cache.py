"""Cache port - Injectable session cache abstraction.

A resolution session owns one cache instance and discards it when
the session ends. The cache must be able to memoize a "no match",
so presence is queried separately from the stored value.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Hashable, Optional, Protocol, TypeVar

T = TypeVar("T")


class CachePort(Protocol[T]):
    """Port for caching.

    Implementations:
    - adapters/cache/memory_cache.py (InMemoryCache) - Production
    - adapters/cache/null_cache.py (NullCache) - Testing, cache disabled

    Removing the cache must never change resolution outcomes, only
    latency; NullCache exists to prove exactly that in tests.
    """

    def contains(self, key: Hashable) -> bool:
        """Check whether a value (possibly None) is memoized for ``key``."""
        ...

    def get(self, key: Hashable) -> Optional[T]:
        """Get a value from the cache.

        Args:
            key: The cache key.

        Returns:
            The cached value, or None if not found.
        """
        ...

    def set(self, key: Hashable, value: T) -> None:
        """Set a value in the cache.

        Args:
            key: The cache key.
            value: The value to cache.
        """
        ...

    def get_or_compute(self, key: Hashable, compute_fn: Callable[[], T]) -> T:
        """Get from cache or compute and cache the value.

        This is the primary method for the cache-aside pattern:
        1. Check if key exists in cache
        2. If yes, return cached value
        3. If no, call compute_fn, cache result, return result

        Args:
            key: The cache key.
            compute_fn: Function to compute the value if not cached.

        Returns:
            The cached or computed value.
        """
        ...

    def clear(self) -> int:
        """Clear all entries from the cache.

        Returns:
            Number of entries that were cleared.
        """
        ...

    def size(self) -> int:
        """Return the number of entries in the cache."""
        ...

    def stats(self) -> Dict[str, Any]:
        """Return hit/miss statistics."""
        ...
