"""Journey gateway - public transport journey planning via TransportAPI."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from ...domain.models import (
    Empty,
    GatewayResult,
    GeoLocation,
    JourneyLeg,
    JourneySummary,
    Place,
    Success,
)
from .client import TransportApiClient
from .schemas import JourneyResponse, RoutePart

_WALKING_MODES = {"foot", "walk", "walking"}


def parse_duration_minutes(value: Optional[str]) -> Optional[int]:
    """Convert 'HH:MM:SS' (or 'HH:MM') into whole minutes."""
    if not value:
        return None
    parts = value.split(":")
    try:
        numbers = [int(p) for p in parts]
    except ValueError:
        return None
    if len(numbers) == 3:
        hours, minutes, seconds = numbers
    elif len(numbers) == 2:
        hours, minutes, seconds = numbers[0], numbers[1], 0
    else:
        return None
    return hours * 60 + minutes + (1 if seconds >= 30 else 0)


def _to_leg(part: RoutePart) -> JourneyLeg:
    return JourneyLeg(
        mode=part.mode,
        from_name=part.from_point_name,
        to_name=part.to_point_name,
        line_name=part.line_name or None,
        direction=part.destination or None,
        departure_time=part.departure_time or None,
    )


@dataclass
class TransportApiJourneyGateway:
    """First suggested public transport journey between two points.

    This adapter implements JourneyGatewayPort. The summary describes the
    first ridden leg (the walk to the stop is skipped when a ride follows).
    """

    client: TransportApiClient = field(default_factory=TransportApiClient)
    name: str = "transportapi"
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    @property
    def enabled(self) -> bool:
        return self.client.enabled

    def fetch(self, origin: GeoLocation, destination: Place) -> GatewayResult:
        target = destination.location
        response = self.client.get(
            "public_journey.json",
            JourneyResponse,
            gateway=self.name,
            params={
                "from": f"lonlat:{origin.longitude},{origin.latitude}",
                "to": f"lonlat:{target.longitude},{target.latitude}",
            },
        )

        route = next((r for r in response.routes if r.route_parts), None)
        if route is None:
            return Empty(source=self.name, reason="no journey found")

        ridden = [p for p in route.route_parts if p.mode.lower() not in _WALKING_MODES]
        first = ridden[0] if ridden else route.route_parts[0]
        summary = JourneySummary(
            destination_name=destination.name,
            duration_minutes=parse_duration_minutes(route.duration),
            first_leg=_to_leg(first),
            legs=len(route.route_parts),
        )
        self._logger.info(
            "Journey planned",
            extra={"destination": destination.name, "legs": summary.legs},
        )
        return Success(summary, source=self.name)
