"""Null cache implementation.

This cache always misses. Sessions built with it recompute every
resolution, which is how tests prove the cache never changes an
outcome. It is also injected when caching is disabled in config.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Generic, Hashable, Optional, TypeVar

T = TypeVar("T")


@dataclass
class NullCache(Generic[T]):
    """No-op cache - always misses.

    Implements the CachePort protocol but never stores anything.
    Every get_or_compute() calls the compute function.
    """

    name: str = "null"

    def contains(self, key: Hashable) -> bool:
        return False

    def get(self, key: Hashable) -> Optional[T]:
        return None

    def set(self, key: Hashable, value: T) -> None:
        pass

    def get_or_compute(self, key: Hashable, compute_fn: Callable[[], T]) -> T:
        """Always calls compute_fn.

        Args:
            key: The cache key (ignored).
            compute_fn: Function to compute the value.

        Returns:
            The computed value (never cached).
        """
        return compute_fn()

    def clear(self) -> int:
        return 0

    def size(self) -> int:
        return 0

    def stats(self) -> Dict[str, int]:
        return {
            "size": 0,
            "hits": 0,
            "misses": 0,
            "hit_rate_percent": 0,
        }
