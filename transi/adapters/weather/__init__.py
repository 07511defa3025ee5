"""Weather adapters - Implementations of WeatherGatewayPort.

Available implementations:
- OpenWeatherGateway: OpenWeatherMap current conditions
"""

from .openweather_adapter import OpenWeatherGateway

__all__ = ["OpenWeatherGateway"]
