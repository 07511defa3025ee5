"""Cache port - Injectable caching abstraction.

The only process-wide cache is the geocoding cache: place name ->
coordinates, never invalidated within a process lifetime. Writes are
idempotent, so two requests racing on the same key are harmless.
"""

from __future__ import annotations

from typing import Callable, Optional, Protocol, TypeVar

T = TypeVar("T")


class CachePort(Protocol[T]):
    """Port for caching.

    Implementations:
    - adapters/cache/memory_cache.py (InMemoryCache) - Production
    - adapters/cache/null_cache.py (NullCache) - Testing
    """

    def get(self, key: str) -> Optional[T]:
        """Return the cached value, or None on a miss."""
        ...

    def contains(self, key: str) -> bool:
        """Return True if the key is cached, even when its value is None."""
        ...

    def set(self, key: str, value: T) -> None:
        """Store a value under a key."""
        ...

    def get_or_compute(self, key: str, compute_fn: Callable[[], T]) -> T:
        """Get from cache or compute and cache the value.

        Args:
            key: The cache key.
            compute_fn: Function to compute the value if not cached.

        Returns:
            The cached or computed value.
        """
        ...

    def size(self) -> int:
        """Return the number of entries in the cache."""
        ...
