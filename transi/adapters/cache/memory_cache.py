"""Thread-safe in-memory cache.

Backs the geocoding cache: keyed by normalized place name, entries live
for the whole process unless a TTL is configured. Misses are cached too
(as None) so an unknown place is not looked up again on every request.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generic, Optional, Tuple, TypeVar

T = TypeVar("T")


@dataclass
class InMemoryCache(Generic[T]):
    """Thread-safe in-memory cache with optional TTL.

    This cache implements the CachePort protocol. Writes are idempotent:
    computing the same key twice and storing it twice is harmless, so
    compute_fn runs outside the lock.

    Attributes:
        default_ttl_seconds: Time-to-live for entries (None = no expiry)
        name: Cache name for logging

    Example:
        cache = InMemoryCache[Place](name="geocode")
        place = cache.get_or_compute("exeter", lambda: geocode("Exeter"))
    """

    default_ttl_seconds: Optional[float] = None
    name: str = "cache"

    _store: Dict[str, Tuple[Any, float]] = field(default_factory=dict, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    # Statistics
    _hits: int = field(default=0, repr=False)
    _misses: int = field(default=0, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(f"cache.{self.name}")

    def _live_entry(self, key: str) -> Optional[Tuple[Any, float]]:
        entry = self._store.get(key)
        if entry is None:
            return None
        if time.time() > entry[1]:
            del self._store[key]
            self._logger.debug("Cache entry expired", extra={"key": key})
            return None
        return entry

    def get(self, key: str) -> Optional[T]:
        """Return the cached value, or None if absent or expired."""
        with self._lock:
            entry = self._live_entry(key)
            if entry is None:
                self._misses += 1
                return None
            self._hits += 1
            return entry[0]

    def contains(self, key: str) -> bool:
        """Return True if the key is cached, even when its value is None."""
        with self._lock:
            return self._live_entry(key) is not None

    def set(self, key: str, value: T) -> None:
        """Store a value under a key."""
        with self._lock:
            if self.default_ttl_seconds is not None:
                expiry = time.time() + self.default_ttl_seconds
            else:
                expiry = float("inf")
            self._store[key] = (value, expiry)
            self._logger.debug("Cache entry set", extra={"key": key})

    def get_or_compute(self, key: str, compute_fn: Callable[[], T]) -> T:
        """Get from cache or compute and cache the value.

        A cached None counts as a hit.
        """
        with self._lock:
            entry = self._live_entry(key)
            if entry is not None:
                self._hits += 1
                self._logger.debug("Cache hit", extra={"key": key})
                return entry[0]
            self._misses += 1

        self._logger.debug("Cache miss, computing", extra={"key": key})
        computed = compute_fn()
        self.set(key, computed)
        return computed

    def size(self) -> int:
        with self._lock:
            return len(self._store)

    def stats(self) -> Dict[str, Any]:
        """Return hit/miss counts and size."""
        with self._lock:
            total = self._hits + self._misses
            hit_rate = (self._hits / total * 100) if total > 0 else 0.0
            return {
                "size": len(self._store),
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate_percent": round(hit_rate, 1),
            }
