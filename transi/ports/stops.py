"""Stop directory port - Read-only StopReference table."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Protocol, Sequence

if TYPE_CHECKING:
    from ..domain.models import GeoLocation, StopReference


class StopDirectoryPort(Protocol):
    """Port for the static stop table.

    Implementation: adapters/stops/csv_directory.py

    Loaded once at startup and never mutated.
    """

    def lookup(self, code: str) -> Optional[StopReference]:
        """Find a stop by its short code (case-insensitive)."""
        ...

    def codes(self) -> frozenset[str]:
        """All known short codes, lower-cased."""
        ...

    def find_in_text(self, text: str) -> Optional[StopReference]:
        """Return the first known stop code mentioned in free text."""
        ...

    def nearest(
        self, location: GeoLocation, max_km: float
    ) -> Optional[tuple[StopReference, float]]:
        """Return the closest stop within max_km and its distance."""
        ...

    def list_stops(self) -> Sequence[StopReference]:
        ...
