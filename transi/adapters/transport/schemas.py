"""Response schemas for TransportAPI endpoints.

Upstream JSON is validated here, at the gateway boundary, so a changed or
truncated payload fails fast instead of leaking missing keys into the
composer. Unknown fields are ignored.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class _Schema(BaseModel):
    model_config = ConfigDict(extra="ignore")


class DepartureItem(_Schema):
    line_name: Optional[str] = None
    line: Optional[str] = None
    direction: Optional[str] = None
    expected_departure_time: Optional[str] = None
    best_departure_estimate: Optional[str] = None
    aimed_departure_time: Optional[str] = None

    @property
    def time(self) -> Optional[str]:
        return (
            self.expected_departure_time
            or self.best_departure_estimate
            or self.aimed_departure_time
        )


class LiveDeparturesResponse(_Schema):
    atcocode: Optional[str] = None
    name: Optional[str] = None
    departures: Optional[Dict[str, List[DepartureItem]]] = None


class PlaceMember(_Schema):
    type: Optional[str] = None
    name: str
    latitude: float
    longitude: float
    atcocode: Optional[str] = None
    station_code: Optional[str] = None
    smscode: Optional[str] = None
    distance: Optional[float] = None


class PlacesResponse(_Schema):
    member: List[PlaceMember] = Field(default_factory=list)


class RoutePart(_Schema):
    mode: str = ""
    from_point_name: str = ""
    to_point_name: str = ""
    destination: Optional[str] = None
    line_name: Optional[str] = None
    departure_time: Optional[str] = None


class JourneyRoute(_Schema):
    duration: Optional[str] = None
    route_parts: List[RoutePart] = Field(default_factory=list)


class JourneyResponse(_Schema):
    routes: List[JourneyRoute] = Field(default_factory=list)


class FareItem(_Schema):
    name: str
    price: Union[float, str]
    currency: str = "GBP"


class FaresResponse(_Schema):
    fares: List[FareItem] = Field(default_factory=list)
