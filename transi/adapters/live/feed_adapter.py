"""Live vehicle gateway.

Fetches the real-time feed for a bounding box around the caller, decodes
it, keeps vehicles inside the search radius, sorts them nearest first and
truncates the list so responses stay small whatever the feed size.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from ...config import LiveFeedConfig, get_config
from ...domain.errors import ConfigMissing
from ...domain.models import (
    Empty,
    GatewayResult,
    GeoLocation,
    Success,
    Vehicle,
    VehicleList,
)
from ...geo import bounding_box, haversine_km
from ..http import HttpClient
from .decoders import DECODERS

MAX_VEHICLES = 40


@dataclass
class LiveFeedGateway:
    """Vehicles near a point from a SIRI-VM or GTFS-realtime feed.

    This adapter implements LiveVehicleGatewayPort.

    Attributes:
        config: Feed URL, key, format, radius and truncation size
        http: Shared HTTP client
    """

    config: LiveFeedConfig = field(default_factory=lambda: get_config().live)
    http: HttpClient = field(default_factory=HttpClient)
    name: str = "bods"
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    @property
    def enabled(self) -> bool:
        return self.config.enabled

    @property
    def max_vehicles(self) -> int:
        return min(self.config.max_vehicles, MAX_VEHICLES)

    def fetch(
        self, location: GeoLocation, radius_km: Optional[float] = None
    ) -> GatewayResult:
        """Vehicles within radius_km of location, nearest first.

        Returns:
            Success(VehicleList) with at most `max_vehicles` entries, or
            Empty when nothing is in range.
        """
        if not self.config.enabled:
            raise ConfigMissing(
                "live feed disabled: no API key configured",
                gateway=self.name,
                setting_name="BODS_API_KEY",
            )

        radius = radius_km if radius_km and radius_km > 0 else self.config.radius_km
        box = bounding_box(location.latitude, location.longitude, radius)
        payload = self.http.get_bytes(
            self.config.url,
            gateway=self.name,
            params={
                "boundingBox": ",".join(str(v) for v in box),
                "api_key": self.config.api_key,
            },
        )

        decode = DECODERS[self.config.feed_format]
        sightings = decode(payload)

        vehicles = []
        for sighting in sightings:
            distance = haversine_km(
                location.latitude,
                location.longitude,
                sighting.latitude,
                sighting.longitude,
            )
            if distance > radius:
                continue
            vehicles.append(
                Vehicle(
                    vehicle_id=sighting.vehicle_id,
                    line=sighting.line,
                    latitude=sighting.latitude,
                    longitude=sighting.longitude,
                    bearing=sighting.bearing,
                    distance_km=distance,
                )
            )

        vehicles.sort(key=lambda v: v.distance_km)
        vehicles = vehicles[: self.max_vehicles]
        self._logger.info(
            "Live vehicles filtered",
            extra={"decoded": len(sightings), "in_radius": len(vehicles)},
        )

        if not vehicles:
            return Empty(source=self.name, reason="no vehicles in range")
        return Success(VehicleList(tuple(vehicles), radius_km=radius), source=self.name)
