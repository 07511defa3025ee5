"""Gateway ports - One stateless adapter per external data provider.

Every gateway returns a GatewayResult: `Success(payload)` when it has
usable data, `Empty` when the upstream answered with nothing useful. It
raises a `TransiError` subclass (`UpstreamUnavailable`,
`UpstreamMalformed`, `ConfigMissing`) when it cannot be used at all; the
dispatcher converts those into `Failure`.

All calls are bounded by the shared HTTP timeout.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Protocol

if TYPE_CHECKING:
    from ..domain.models import GatewayResult, GeoLocation, Place


class GatewayPort(Protocol):
    """Capabilities shared by every gateway."""

    name: str

    @property
    def enabled(self) -> bool:
        """False when the gateway was built without its credentials."""
        ...


class DepartureGatewayPort(GatewayPort, Protocol):
    """Live departures and nearby stops.

    Implementation: adapters/transport/departures.py
    """

    def fetch(self, atco_code: str, stop_name: Optional[str] = None) -> GatewayResult:
        """Upcoming services at a stop, as a DepartureBoard."""
        ...

    def nearby(self, location: GeoLocation) -> GatewayResult:
        """Stops around a point, as a tuple of NearbyStop (nearest first)."""
        ...


class LiveVehicleGatewayPort(GatewayPort, Protocol):
    """Real-time vehicle positions.

    Implementation: adapters/live/feed_adapter.py
    """

    def fetch(
        self, location: GeoLocation, radius_km: Optional[float] = None
    ) -> GatewayResult:
        """Vehicles within the radius, nearest first, as a VehicleList."""
        ...


class FareGatewayPort(GatewayPort, Protocol):
    """Fare lookup.

    Implementation: adapters/transport/fares.py
    """

    def fetch(
        self,
        destination: Optional[str] = None,
        origin: Optional[str] = None,
        line: Optional[str] = None,
    ) -> GatewayResult:
        """Cheapest matching fare, as a FareQuote."""
        ...


class JourneyGatewayPort(GatewayPort, Protocol):
    """Public transport journey planning.

    Implementation: adapters/transport/journeys.py
    """

    def fetch(self, origin: GeoLocation, destination: Place) -> GatewayResult:
        """First suggested journey, as a JourneySummary."""
        ...


class WeatherGatewayPort(GatewayPort, Protocol):
    """Current weather.

    Implementation: adapters/weather/openweather_adapter.py
    """

    def fetch(
        self, location: GeoLocation, place_name: Optional[str] = None
    ) -> GatewayResult:
        """Current conditions, as a WeatherReport."""
        ...


class WebSearchGatewayPort(GatewayPort, Protocol):
    """Generic web search.

    Implementation: adapters/search/google_adapter.py
    """

    def fetch(self, query: str) -> GatewayResult:
        """Top-K hits (and a page excerpt when snippets are thin), as a SearchResult."""
        ...


class LLMGatewayPort(GatewayPort, Protocol):
    """Chat completion, the universal fallback.

    Implementation: adapters/llm/openai_adapter.py
    """

    def fetch(
        self,
        system_prompt: Optional[str],
        user_text: str,
        *,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ) -> GatewayResult:
        """Free-text completion, as a Completion."""
        ...
