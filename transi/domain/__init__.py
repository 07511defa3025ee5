"""Domain layer - Core models and errors.

This module contains immutable domain models and typed errors
used throughout the application. No external dependencies.
"""

from .errors import (
    ConfigMissing,
    InputError,
    TransiError,
    UpstreamMalformed,
    UpstreamUnavailable,
)
from .models import (
    Answer,
    Completion,
    Departure,
    DepartureBoard,
    Empty,
    Failure,
    FareQuote,
    GatewayResult,
    GeoLocation,
    Intent,
    JourneyLeg,
    JourneySummary,
    NearbyStop,
    Place,
    Question,
    SearchHit,
    SearchResult,
    StopReference,
    Success,
    Vehicle,
    VehicleList,
    WeatherReport,
)

__all__ = [
    # Models
    "Answer",
    "Completion",
    "Departure",
    "DepartureBoard",
    "Empty",
    "Failure",
    "FareQuote",
    "GatewayResult",
    "GeoLocation",
    "Intent",
    "JourneyLeg",
    "JourneySummary",
    "NearbyStop",
    "Place",
    "Question",
    "SearchHit",
    "SearchResult",
    "StopReference",
    "Success",
    "Vehicle",
    "VehicleList",
    "WeatherReport",
    # Errors
    "TransiError",
    "InputError",
    "UpstreamUnavailable",
    "UpstreamMalformed",
    "ConfigMissing",
]
