"""Centralized configuration using Pydantic Settings.

Every upstream credential and tunable lives here, read once from the
environment at startup. Sub-configurations are frozen so that gateways can
hold a reference to them without worrying about later mutation.

Configuration can be overridden via environment variables:
- TRANSI_HTTP_TIMEOUT_SECONDS=5
- TRANSI_LIVE_FEED_FORMAT=gtfs_rt
- TRANSI_LLM_MODEL=gpt-4o-mini
- etc.

Credentials also accept the plain names used by the hosting environment
(OPENAI_API_KEY, TRANSPORT_API_ID, TRANSPORT_API_KEY, OPENWEATHER_KEY,
GOOGLE_API_KEY, GOOGLE_CX_ID, BODS_API_KEY, PORT).
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_DIR = Path(__file__).resolve().parent


class HttpConfig(BaseSettings):
    """Shared HTTP client settings.

    Environment variables prefixed with TRANSI_HTTP_.
    """

    model_config = SettingsConfigDict(env_prefix="TRANSI_HTTP_", frozen=True)

    timeout_seconds: float = Field(default=8.0, gt=0)
    user_agent: str = "Transi-Autopilot/2.1"


class TransportApiConfig(BaseSettings):
    """TransportAPI credentials and limits (stops, departures, journeys, fares).

    Environment variables prefixed with TRANSI_TRANSPORT_.
    """

    model_config = SettingsConfigDict(
        env_prefix="TRANSI_TRANSPORT_", frozen=True, populate_by_name=True
    )

    app_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("TRANSI_TRANSPORT_APP_ID", "TRANSPORT_API_ID"),
    )
    app_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("TRANSI_TRANSPORT_APP_KEY", "TRANSPORT_API_KEY"),
    )
    base_url: str = "https://transportapi.com/v3/uk"
    departures_limit: int = Field(default=5, ge=1)
    nearby_limit: int = Field(default=20, ge=1)
    fares_url: Optional[str] = None

    @property
    def enabled(self) -> bool:
        """True when both TransportAPI credentials are configured."""
        return bool(self.app_id and self.app_key)

    @property
    def fares_enabled(self) -> bool:
        """True when the fares endpoint can be queried."""
        return self.enabled and bool(self.fares_url)


class LiveFeedConfig(BaseSettings):
    """Live vehicle position feed.

    Environment variables prefixed with TRANSI_LIVE_.
    """

    model_config = SettingsConfigDict(
        env_prefix="TRANSI_LIVE_", frozen=True, populate_by_name=True
    )

    url: str = "https://data.bus-data.dft.gov.uk/api/v1/datafeed/"
    api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("TRANSI_LIVE_API_KEY", "BODS_API_KEY"),
    )
    feed_format: Literal["siri_vm", "gtfs_rt"] = "siri_vm"
    radius_km: float = Field(default=1.5, gt=0)
    max_vehicles: int = Field(default=40, ge=1, le=40)

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)


class WeatherConfig(BaseSettings):
    """OpenWeatherMap current conditions.

    Environment variables prefixed with TRANSI_WEATHER_.
    """

    model_config = SettingsConfigDict(
        env_prefix="TRANSI_WEATHER_", frozen=True, populate_by_name=True
    )

    api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("TRANSI_WEATHER_API_KEY", "OPENWEATHER_KEY"),
    )
    base_url: str = "https://api.openweathermap.org/data/2.5/weather"

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)


class WebSearchConfig(BaseSettings):
    """Google Custom Search settings.

    Environment variables prefixed with TRANSI_SEARCH_.
    """

    model_config = SettingsConfigDict(
        env_prefix="TRANSI_SEARCH_", frozen=True, populate_by_name=True
    )

    api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("TRANSI_SEARCH_API_KEY", "GOOGLE_API_KEY"),
    )
    cx_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("TRANSI_SEARCH_CX_ID", "GOOGLE_CX_ID"),
    )
    base_url: str = "https://www.googleapis.com/customsearch/v1"
    top_k: int = Field(default=3, ge=1, le=10)
    site_restriction: Optional[str] = None
    min_snippet_chars: int = 160
    page_char_budget: int = Field(default=3000, gt=0)

    @property
    def enabled(self) -> bool:
        return bool(self.api_key and self.cx_id)


class LLMConfig(BaseSettings):
    """Chat completion settings (OpenAI-compatible endpoint).

    Environment variables prefixed with TRANSI_LLM_.
    """

    model_config = SettingsConfigDict(
        env_prefix="TRANSI_LLM_", frozen=True, populate_by_name=True
    )

    api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("TRANSI_LLM_API_KEY", "OPENAI_API_KEY"),
    )
    base_url: str = "https://api.openai.com/v1/chat/completions"
    model: str = "gpt-4o-mini"
    max_tokens: int = Field(default=250, ge=1)
    temperature: float = 0.6
    summary_max_tokens: int = Field(default=150, ge=1)
    summary_temperature: float = 0.4

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)


class GeocodingConfig(BaseSettings):
    """Geocoding configuration.

    Environment variables prefixed with TRANSI_GEO_.
    """

    model_config = SettingsConfigDict(env_prefix="TRANSI_GEO_", frozen=True)

    user_agent: str = "Transi-Autopilot/1.0"
    timeout_seconds: int = 10
    rate_limit_delay: float = 1.0
    max_retries: int = 2
    error_wait_seconds: float = 2.0
    country_codes: str = "gb"
    language: str = "en"


class StopsConfig(BaseSettings):
    """StopReference table location.

    Environment variables prefixed with TRANSI_STOPS_.
    """

    model_config = SettingsConfigDict(env_prefix="TRANSI_STOPS_", frozen=True)

    stops_file: Path = Field(default_factory=lambda: PACKAGE_DIR / "data" / "stops.csv")
    nearest_max_km: float = Field(default=0.6, gt=0)


class TelephonyConfig(BaseSettings):
    """Voice callback rendering.

    Environment variables prefixed with TRANSI_VOICE_.
    """

    model_config = SettingsConfigDict(env_prefix="TRANSI_VOICE_", frozen=True)

    voice: str = "Polly.Amy"
    language: str = "en-GB"
    reprompt: str = "Is there anything else I can help with?"
    action_path: str = "/voice"
    default_lat: Optional[float] = None
    default_lon: Optional[float] = None


class ServerConfig(BaseSettings):
    """HTTP server binding.

    Environment variables prefixed with TRANSI_SERVER_.
    """

    model_config = SettingsConfigDict(
        env_prefix="TRANSI_SERVER_", frozen=True, populate_by_name=True
    )

    host: str = "0.0.0.0"
    port: int = Field(
        default=10000,
        validation_alias=AliasChoices("TRANSI_SERVER_PORT", "PORT"),
    )


class ObservabilityConfig(BaseSettings):
    """Logging and observability configuration.

    Environment variables prefixed with TRANSI_LOG_.
    """

    model_config = SettingsConfigDict(env_prefix="TRANSI_LOG_", frozen=True)

    level: str = "INFO"
    structured: bool = False  # Set True for JSON logging


class AppConfig(BaseSettings):
    """Main application configuration aggregating all sub-configs.

    This is the main entry point for configuration. Sub-configurations
    can be accessed via attributes:

        config = get_config()
        print(config.llm.model)
        print(config.transport.enabled)

    Environment variables prefixed with TRANSI_.
    """

    model_config = SettingsConfigDict(env_prefix="TRANSI_", frozen=True)

    http: HttpConfig = Field(default_factory=HttpConfig)
    transport: TransportApiConfig = Field(default_factory=TransportApiConfig)
    live: LiveFeedConfig = Field(default_factory=LiveFeedConfig)
    weather: WeatherConfig = Field(default_factory=WeatherConfig)
    search: WebSearchConfig = Field(default_factory=WebSearchConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    geocoding: GeocodingConfig = Field(default_factory=GeocodingConfig)
    stops: StopsConfig = Field(default_factory=StopsConfig)
    telephony: TelephonyConfig = Field(default_factory=TelephonyConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    version: str = "2.1"


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """Get the singleton application configuration.

    Configuration is loaded once and cached. To reload configuration
    (e.g., in tests), use reset_config() first.

    Returns:
        The application configuration instance.
    """
    return AppConfig()


def reset_config() -> None:
    """Reset the configuration cache.

    Call this in tests to ensure a fresh configuration is loaded.
    """
    get_config.cache_clear()
