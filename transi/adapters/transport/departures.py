"""Departure gateway - live departures and nearby stops from TransportAPI.

An absent or malformed departures payload is reported as `Empty`, not
`Failure`: the stop exists, it just has nothing we can read out, and the
dispatcher moves on to web search either way.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from ...domain.errors import UpstreamMalformed
from ...domain.models import (
    Departure,
    DepartureBoard,
    Empty,
    GatewayResult,
    GeoLocation,
    NearbyStop,
    Success,
)
from ...geo import haversine_km
from .client import TransportApiClient
from .schemas import LiveDeparturesResponse, PlacesResponse


@dataclass
class TransportApiDepartureGateway:
    """Live departures by stop identifier, grouped by route.

    This adapter implements DepartureGatewayPort.

    Attributes:
        client: Authenticated TransportAPI client
        name: Source attribution used in answers and logs
    """

    client: TransportApiClient = field(default_factory=TransportApiClient)
    name: str = "transportapi"
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    @property
    def enabled(self) -> bool:
        return self.client.enabled

    def fetch(self, atco_code: str, stop_name: Optional[str] = None) -> GatewayResult:
        """Fetch upcoming departures for a stop.

        Args:
            atco_code: National stop identifier.
            stop_name: Display name to use instead of the upstream one.

        Returns:
            Success(DepartureBoard), or Empty when nothing is departing.
        """
        limit = self.client.config.departures_limit
        try:
            response = self.client.get(
                f"bus/stop/{atco_code}/live.json",
                LiveDeparturesResponse,
                gateway=self.name,
                params={"group": "route", "limit": limit, "nextbuses": "yes"},
            )
        except UpstreamMalformed as e:
            self._logger.warning(
                "Departures payload malformed",
                extra={"atco_code": atco_code, "error": str(e)},
            )
            return Empty(source=self.name, reason="malformed departures payload")

        routes: list[tuple[str, tuple[Departure, ...]]] = []
        for route, items in (response.departures or {}).items():
            departures = tuple(
                Departure(
                    line_name=item.line_name or item.line or route,
                    direction=item.direction or "",
                    expected_departure_time=item.time or "",
                )
                for item in items
                if item.time
            )[:limit]
            if departures:
                routes.append((route, departures))

        if not routes:
            self._logger.info("No departures", extra={"atco_code": atco_code})
            return Empty(source=self.name, reason="no departures")

        board = DepartureBoard(
            atco_code=response.atcocode or atco_code,
            stop_name=stop_name or response.name or atco_code,
            routes=tuple(routes),
        )
        self._logger.info(
            "Departures fetched",
            extra={"atco_code": atco_code, "routes": len(routes)},
        )
        return Success(board, source=self.name)

    def nearby(self, location: GeoLocation) -> GatewayResult:
        """Bus stops and stations around a point, nearest first."""
        response = self.client.get(
            "places.json",
            PlacesResponse,
            gateway=self.name,
            params={
                "lat": location.latitude,
                "lon": location.longitude,
                "type": "bus_stop,train_station",
                "limit": self.client.config.nearby_limit,
            },
        )

        stops = []
        for member in response.member:
            distance_m = member.distance
            if distance_m is None:
                distance_m = 1000 * haversine_km(
                    location.latitude,
                    location.longitude,
                    member.latitude,
                    member.longitude,
                )
            stops.append(
                NearbyStop(
                    id=member.atcocode or member.station_code or member.name,
                    name=member.name,
                    latitude=member.latitude,
                    longitude=member.longitude,
                    code=member.station_code or member.smscode,
                    distance_m=distance_m,
                    is_bus_stop=member.type == "bus_stop",
                )
            )

        if not stops:
            return Empty(source=self.name, reason="no stops nearby")
        stops.sort(key=lambda s: s.distance_m or 0.0)
        return Success(tuple(stops), source=self.name)
