"""Ports layer - Abstract interfaces (Protocols) for the application.

Ports define the contracts between the dispatcher and the external
adapters. They enable dependency injection and make the system testable:
every gateway can be replaced by a spy in tests.
"""

from .cache import CachePort
from .gateways import (
    DepartureGatewayPort,
    FareGatewayPort,
    GatewayPort,
    JourneyGatewayPort,
    LiveVehicleGatewayPort,
    LLMGatewayPort,
    WeatherGatewayPort,
    WebSearchGatewayPort,
)
from .geocoding import GeocoderPort
from .nlp import IntentClassifierPort
from .stops import StopDirectoryPort

__all__ = [
    # Gateways
    "GatewayPort",
    "DepartureGatewayPort",
    "LiveVehicleGatewayPort",
    "FareGatewayPort",
    "JourneyGatewayPort",
    "WeatherGatewayPort",
    "WebSearchGatewayPort",
    "LLMGatewayPort",
    # Lookups
    "GeocoderPort",
    "StopDirectoryPort",
    # NLP
    "IntentClassifierPort",
    # Cache
    "CachePort",
]
