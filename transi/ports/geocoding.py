"""Geocoding port - Abstraction for place names and coordinates.

This protocol defines the contract for geocoding services, allowing
different implementations (Nominatim, a static table in tests, etc.).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Protocol

if TYPE_CHECKING:
    from ..domain.models import GeoLocation, Place


class GeocoderPort(Protocol):
    """Port for geocoding services.

    Implementation: adapters/geocoding/nominatim_adapter.py

    Lookups never raise for "not found" or upstream trouble; they return
    None so callers can fall back.
    """

    def geocode(self, query: str) -> Optional[Place]:
        """Geocode a free-text place name (town, street, postcode).

        Args:
            query: The place to look up (e.g., "Exeter", "PL1 1EA").

        Returns:
            Place with coordinates, or None if not found.
        """
        ...

    def reverse_geocode(self, location: GeoLocation) -> Optional[Place]:
        """Turn coordinates into a readable place.

        Args:
            location: GPS coordinates to look up.

        Returns:
            Place for the coordinates, or None if not found.
        """
        ...
