"""Nominatim geocoder adapter.

This adapter is the geocoding cache: free-text place names and rounded
coordinates are looked up once per process through OpenStreetMap
Nominatim, with rate limiting, and memoized in a CachePort.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from geopy.exc import GeocoderServiceError, GeocoderTimedOut, GeocoderUnavailable
from geopy.extra.rate_limiter import RateLimiter
from geopy.geocoders import Nominatim

from ...config import GeocodingConfig, get_config
from ...domain.models import GeoLocation, Place
from ...ports.cache import CachePort
from ..cache.memory_cache import InMemoryCache

_NAME_KEYS = ("city", "town", "village", "suburb", "municipality", "hamlet")


def normalize_place_key(query: str) -> str:
    """Cache key for a place name: trimmed, lower-cased, single-spaced."""
    return " ".join(query.split()).lower()


def _place_name(address: Mapping[str, Any], display_name: str) -> str:
    for key in _NAME_KEYS:
        if address.get(key):
            return str(address[key])
    return display_name.split(",")[0].strip()


@dataclass
class NominatimGeocoderAdapter:
    """Nominatim geocoder adapter with caching and rate limiting.

    Attributes:
        config: Geocoding configuration
        cache: Cache for geocoding results, keyed by normalized query
    """

    config: GeocodingConfig = field(default_factory=lambda: get_config().geocoding)
    cache: CachePort[Optional[Place]] = field(
        default_factory=lambda: InMemoryCache(name="geocode")
    )

    _geolocator: Optional[Nominatim] = field(default=None, repr=False)
    _geocode_fn: Optional[Any] = field(default=None, repr=False)
    _reverse_fn: Optional[Any] = field(default=None, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def _get_geolocator(self) -> Nominatim:
        """Get or initialize the geocoder with rate limiting."""
        if self._geolocator is not None:
            return self._geolocator

        self._logger.debug(
            "Initializing Nominatim geocoder",
            extra={
                "user_agent": self.config.user_agent,
                "timeout": self.config.timeout_seconds,
            },
        )

        self._geolocator = Nominatim(
            user_agent=self.config.user_agent,
            timeout=self.config.timeout_seconds,
        )
        limiter_options = dict(
            min_delay_seconds=self.config.rate_limit_delay,
            max_retries=self.config.max_retries,
            error_wait_seconds=self.config.error_wait_seconds,
            swallow_exceptions=False,
        )
        self._geocode_fn = RateLimiter(self._geolocator.geocode, **limiter_options)
        self._reverse_fn = RateLimiter(self._geolocator.reverse, **limiter_options)
        return self._geolocator

    def geocode(self, query: str) -> Optional[Place]:
        """Geocode a free-text place name.

        Args:
            query: The place to geocode.

        Returns:
            Place with coordinates, or None if not found.
        """
        if not query or not query.strip():
            return None

        cache_key = normalize_place_key(query)
        if self.cache.contains(cache_key):
            self._logger.debug("Geocode cache hit", extra={"query": query})
            return self.cache.get(cache_key)

        try:
            self._get_geolocator()
            location = self._geocode_fn(  # type: ignore[misc]
                query,
                language=self.config.language,
                country_codes=self.config.country_codes,
                addressdetails=True,
            )
        except (GeocoderTimedOut, GeocoderUnavailable, GeocoderServiceError) as e:
            # Not cached: the next request may find the service back.
            self._logger.warning(
                "Geocode service error",
                extra={"query": query, "error": str(e)},
            )
            return None

        if location is None:
            self._logger.debug("Geocode returned no result", extra={"query": query})
            self.cache.set(cache_key, None)
            return None

        raw = location.raw or {}
        place = Place(
            name=_place_name(raw.get("address", {}), str(location.address or query)),
            location=GeoLocation(
                latitude=float(location.latitude),
                longitude=float(location.longitude),
            ),
            display_name=str(location.address or ""),
        )
        self._logger.debug(
            "Geocode success",
            extra={"query": query, "place": place.name},
        )
        self.cache.set(cache_key, place)
        return place

    def reverse_geocode(self, location: GeoLocation) -> Optional[Place]:
        """Reverse geocode coordinates to a readable place.

        Coordinates are rounded to ~100m for the cache key so a walking
        caller does not trigger a lookup per request.
        """
        cache_key = f"rev:{location.latitude:.3f},{location.longitude:.3f}"
        if self.cache.contains(cache_key):
            return self.cache.get(cache_key)

        try:
            self._get_geolocator()
            result = self._reverse_fn(  # type: ignore[misc]
                (location.latitude, location.longitude),
                language=self.config.language,
                addressdetails=True,
            )
        except (GeocoderTimedOut, GeocoderUnavailable, GeocoderServiceError) as e:
            self._logger.warning(
                "Reverse geocode failed",
                extra={
                    "lat": location.latitude,
                    "lon": location.longitude,
                    "error": str(e),
                },
            )
            return None

        if result is None:
            self.cache.set(cache_key, None)
            return None

        raw = result.raw or {}
        place = Place(
            name=_place_name(raw.get("address", {}), str(result.address or "")),
            location=location,
            display_name=str(result.address or ""),
        )
        self.cache.set(cache_key, place)
        return place
