"""Null cache implementation for testing.

Always misses, so tests never depend on geocoding results cached by an
earlier test.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass
class NullCache(Generic[T]):
    """No-op cache - every lookup recomputes."""

    name: str = "null"

    def get(self, key: str) -> Optional[T]:
        return None

    def contains(self, key: str) -> bool:
        return False

    def set(self, key: str, value: T) -> None:
        pass

    def get_or_compute(self, key: str, compute_fn: Callable[[], T]) -> T:
        return compute_fn()

    def size(self) -> int:
        return 0
