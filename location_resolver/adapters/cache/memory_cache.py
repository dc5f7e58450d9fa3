"""Thread-safe in-memory session cache.

One instance backs one resolution session, e.g. a single quotation
pricing run that resolves the same handful of strings many times.

Differences from a plain dict:
- Thread-safe with RLock
- Memoizes None ("no match") as a real entry
- Optional FIFO size cap
- Statistics tracking
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generic, Hashable, Optional, TypeVar

T = TypeVar("T")

_MISSING = object()


@dataclass
class InMemoryCache(Generic[T]):
    """Thread-safe in-memory cache.

    This cache implements the CachePort protocol and is injected into
    each resolution session.

    Attributes:
        max_size: Maximum number of entries (None = unlimited)
        name: Cache name for logging

    Example:
        cache = InMemoryCache[Facility](name="session")
        facility = cache.get_or_compute(("SEA", "antwerp"), lambda: lookup("antwerp"))
    """

    max_size: Optional[int] = None
    name: str = "cache"

    _store: Dict[Hashable, Any] = field(default_factory=dict, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    # Statistics
    _hits: int = field(default=0, repr=False)
    _misses: int = field(default=0, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(f"cache.{self.name}")

    def _lookup(self, key: Hashable) -> Any:
        with self._lock:
            value = self._store.get(key, _MISSING)
            if value is _MISSING:
                self._misses += 1
            else:
                self._hits += 1
            return value

    def contains(self, key: Hashable) -> bool:
        """Check whether a value (possibly None) is memoized for ``key``."""
        with self._lock:
            return key in self._store

    def get(self, key: Hashable) -> Optional[T]:
        """Get a value from the cache.

        Args:
            key: The cache key.

        Returns:
            The cached value, or None if not found.
        """
        value = self._lookup(key)
        return None if value is _MISSING else value

    def set(self, key: Hashable, value: T) -> None:
        """Memoize ``value`` (None included) under ``key``.

        When ``max_size`` is reached the oldest entry is dropped first;
        overwriting an existing key never evicts. A cap below one keeps
        the latest entry only.
        """
        with self._lock:
            full = self.max_size is not None and len(self._store) >= self.max_size
            if full and self._store and key not in self._store:
                evicted = next(iter(self._store))
                del self._store[evicted]
                self._logger.debug("Evicted oldest entry", extra={"key": evicted})
            self._store[key] = value

    def get_or_compute(self, key: Hashable, compute_fn: Callable[[], T]) -> T:
        """Return the memoized value or compute, store and return it.

        A memoized None counts as a hit; compute_fn is not called again.
        compute_fn runs outside the lock, so two threads racing on the
        same key may both compute; the last write wins.
        """
        value = self._lookup(key)
        if value is not _MISSING:
            return value

        computed = compute_fn()
        self.set(key, computed)
        return computed

    def clear(self) -> int:
        """Drop every entry and reset the counters.

        Returns:
            Number of entries dropped.
        """
        with self._lock:
            count = len(self._store)
            self._store.clear()
            self._hits = 0
            self._misses = 0
        self._logger.debug("Cache cleared", extra={"entries_cleared": count})
        return count

    def size(self) -> int:
        with self._lock:
            return len(self._store)

    def stats(self) -> Dict[str, Any]:
        """Hit/miss counters for the session summary log line."""
        with self._lock:
            lookups = self._hits + self._misses
            return {
                "size": len(self._store),
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate_percent": round(self._hits / lookups * 100, 1) if lookups else 0.0,
            }
