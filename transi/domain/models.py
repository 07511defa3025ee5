"""Immutable domain models for the Transi assistant.

All models are frozen dataclasses with slots. They have no external
dependencies and represent one request's worth of data: the inbound
Question, the classified Intent, what a gateway returned, and the final
Answer. Nothing here is persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Generic, Mapping, Optional, TypeVar, Union

P = TypeVar("P")


class Intent(Enum):
    """Classified purpose of a user question.

    Used by the dispatcher to pick the primary gateway.
    """

    LIVE_DEPARTURES = auto()
    LIVE_VEHICLE_POSITIONS = auto()
    FARE_LOOKUP = auto()
    JOURNEY_PLANNING = auto()
    WEATHER_LOOKUP = auto()
    GENERAL = auto()


@dataclass(frozen=True, slots=True)
class GeoLocation:
    """GPS coordinates representing a geographic location."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        """Validate coordinate ranges."""
        if not -90 <= self.latitude <= 90:
            raise ValueError(
                f"Latitude must be between -90 and 90, got {self.latitude}"
            )
        if not -180 <= self.longitude <= 180:
            raise ValueError(
                f"Longitude must be between -180 and 180, got {self.longitude}"
            )

    @classmethod
    def parse(cls, lat: Any, lon: Any) -> Optional[GeoLocation]:
        """Build a location from loosely-typed request values.

        Browsers send empty strings when geolocation was denied, so blank,
        missing or out-of-range values yield None instead of raising.
        """
        if lat in (None, "") or lon in (None, ""):
            return None
        try:
            return cls(latitude=float(lat), longitude=float(lon))
        except (TypeError, ValueError):
            return None


@dataclass(frozen=True, slots=True)
class Question:
    """One inbound question.

    Attributes:
        text: Raw question text as typed or transcribed
        location: Caller coordinates, if shared
        place_name: Readable name for the caller's location, if known
    """

    text: str
    location: Optional[GeoLocation] = None
    place_name: Optional[str] = None

    @property
    def normalized_text(self) -> str:
        """Lower-cased, trimmed text used for classification."""
        return " ".join(self.text.split()).lower()

    @property
    def is_empty(self) -> bool:
        return not self.text or not self.text.strip()


@dataclass(frozen=True, slots=True)
class Place:
    """A geocoded place.

    Attributes:
        name: Short display name (town, city or locality)
        location: GPS coordinates
        display_name: Full address line as returned by the geocoder
    """

    name: str
    location: GeoLocation
    display_name: str = ""


@dataclass(frozen=True, slots=True)
class StopReference:
    """Entry of the static stop table.

    Attributes:
        code: Short code printed on the stop flag (e.g. 'A4')
        atco_code: Canonical national stop identifier
        name: Human-readable stop name
        location: Stop coordinates
    """

    code: str
    atco_code: str
    name: str
    location: GeoLocation


@dataclass(frozen=True, slots=True)
class NearbyStop:
    """A stop returned by the nearby-stops lookup."""

    id: str
    name: str
    latitude: float
    longitude: float
    code: Optional[str] = None
    distance_m: Optional[float] = None
    is_bus_stop: bool = True

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "lat": self.latitude,
            "lon": self.longitude,
            "code": self.code,
        }


@dataclass(frozen=True, slots=True)
class Departure:
    """A single upcoming service at a stop."""

    line_name: str
    direction: str
    expected_departure_time: str

    def as_dict(self) -> dict[str, str]:
        return {
            "line_name": self.line_name,
            "direction": self.direction,
            "expected_departure_time": self.expected_departure_time,
        }


@dataclass(frozen=True, slots=True)
class DepartureBoard:
    """Upcoming services at one stop, grouped by route.

    Attributes:
        atco_code: Stop identifier the board was fetched for
        stop_name: Display name of the stop
        routes: Ordered (route name, departures) pairs
    """

    atco_code: str
    stop_name: str
    routes: tuple[tuple[str, tuple[Departure, ...]], ...] = field(
        default_factory=tuple
    )

    @property
    def departures(self) -> tuple[Departure, ...]:
        """All departures in route order."""
        return tuple(dep for _, deps in self.routes for dep in deps)

    def as_dict(self) -> dict[str, Any]:
        return {
            "atcocode": self.atco_code,
            "name": self.stop_name,
            "departures": {
                route: [dep.as_dict() for dep in deps] for route, deps in self.routes
            },
        }


@dataclass(frozen=True, slots=True)
class Vehicle:
    """A live vehicle position relative to the caller."""

    vehicle_id: str
    line: str
    latitude: float
    longitude: float
    bearing: Optional[float]
    distance_km: float

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.vehicle_id,
            "line": self.line,
            "lat": self.latitude,
            "lon": self.longitude,
            "bearing": self.bearing,
            "distance": round(self.distance_km, 3),
        }


@dataclass(frozen=True, slots=True)
class VehicleList:
    """Vehicles near a point, nearest first."""

    vehicles: tuple[Vehicle, ...]
    radius_km: float

    def as_dict(self) -> dict[str, Any]:
        return {"buses": [v.as_dict() for v in self.vehicles]}


@dataclass(frozen=True, slots=True)
class FareQuote:
    """Cheapest fare found for a trip."""

    name: str
    price: float
    currency: str = "GBP"


@dataclass(frozen=True, slots=True)
class JourneyLeg:
    """One leg of a planned journey."""

    mode: str
    from_name: str
    to_name: str
    line_name: Optional[str] = None
    direction: Optional[str] = None
    departure_time: Optional[str] = None


@dataclass(frozen=True, slots=True)
class JourneySummary:
    """Summary of the first suggested journey."""

    destination_name: str
    duration_minutes: Optional[int]
    first_leg: JourneyLeg
    legs: int = 1


@dataclass(frozen=True, slots=True)
class WeatherReport:
    """Current weather at a place."""

    place_name: str
    temperature_c: float
    description: str


@dataclass(frozen=True, slots=True)
class SearchHit:
    """A single web search result."""

    title: str
    link: str
    snippet: str


@dataclass(frozen=True, slots=True)
class SearchResult:
    """Top web search results for a query.

    Attributes:
        query: Query string that was sent
        hits: Top-K results
        page_excerpt: Truncated body text of the top page, fetched when
            snippets were too short to be useful
        summary: Spoken-style summary produced by the LLM, if any
    """

    query: str
    hits: tuple[SearchHit, ...]
    page_excerpt: Optional[str] = None
    summary: Optional[str] = None

    @property
    def snippet_text(self) -> str:
        return "\n".join(hit.snippet for hit in self.hits if hit.snippet)


@dataclass(frozen=True, slots=True)
class Completion:
    """Free-text LLM completion."""

    text: str
    model: str = ""


# ---------------------------------------------------------------------------
# Gateway results
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Success(Generic[P]):
    """The gateway produced usable data."""

    payload: P
    source: str = ""


@dataclass(frozen=True, slots=True)
class Empty:
    """The gateway answered but had nothing useful."""

    source: str = ""
    reason: str = ""


@dataclass(frozen=True, slots=True)
class Failure:
    """The gateway could not be used (network, upstream, parse or config)."""

    source: str
    reason: str
    error: Optional[Exception] = field(default=None, compare=False, repr=False)


GatewayResult = Union[Success[Any], Empty, Failure]


@dataclass(frozen=True, slots=True)
class Answer:
    """Terminal artifact of one request.

    Attributes:
        text: Display / speech text
        source: Attribution of the data source, if any
        data: Optional structured payload (departures, buses, ...)
    """

    text: str
    source: Optional[str] = None
    data: Optional[Mapping[str, Any]] = None
