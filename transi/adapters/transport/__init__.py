"""Transport adapters - TransportAPI-backed gateways.

Available implementations:
- TransportApiDepartureGateway: live departures and nearby stops
- TransportApiJourneyGateway: journey planning
- TransportApiFareGateway: cheapest fare lookup
"""

from .client import TransportApiClient
from .departures import TransportApiDepartureGateway
from .fares import TransportApiFareGateway
from .journeys import TransportApiJourneyGateway

__all__ = [
    "TransportApiClient",
    "TransportApiDepartureGateway",
    "TransportApiFareGateway",
    "TransportApiJourneyGateway",
]
