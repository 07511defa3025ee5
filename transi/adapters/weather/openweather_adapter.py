"""OpenWeatherMap current-conditions gateway."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ...config import WeatherConfig, get_config
from ...domain.errors import ConfigMissing, UpstreamMalformed
from ...domain.models import GatewayResult, GeoLocation, Success, WeatherReport
from ..http import HttpClient


class _Main(BaseModel):
    model_config = ConfigDict(extra="ignore")

    temp: float


class _Condition(BaseModel):
    model_config = ConfigDict(extra="ignore")

    description: str = ""


class CurrentWeatherResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = ""
    main: _Main
    weather: List[_Condition] = Field(default_factory=list)


@dataclass
class OpenWeatherGateway:
    """Current weather at a point.

    This adapter implements WeatherGatewayPort.
    """

    config: WeatherConfig = field(default_factory=lambda: get_config().weather)
    http: HttpClient = field(default_factory=HttpClient)
    name: str = "openweathermap"
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    @property
    def enabled(self) -> bool:
        return self.config.enabled

    def fetch(
        self, location: GeoLocation, place_name: Optional[str] = None
    ) -> GatewayResult:
        if not self.config.enabled:
            raise ConfigMissing(
                "weather disabled: no API key configured",
                gateway=self.name,
                setting_name="OPENWEATHER_KEY",
            )

        body = self.http.get_json(
            self.config.base_url,
            gateway=self.name,
            params={
                "lat": location.latitude,
                "lon": location.longitude,
                "units": "metric",
                "appid": self.config.api_key,
            },
        )
        try:
            current = CurrentWeatherResponse.model_validate(body)
        except ValidationError as e:
            raise UpstreamMalformed(
                "weather payload missing temperature", gateway=self.name, cause=e
            )

        description = current.weather[0].description if current.weather else ""
        report = WeatherReport(
            place_name=current.name or place_name or "your area",
            temperature_c=current.main.temp,
            description=description,
        )
        self._logger.info(
            "Weather fetched",
            extra={"place": report.place_name, "temp_c": report.temperature_c},
        )
        return Success(report, source=self.name)
