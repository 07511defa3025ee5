"""Dependency injection container.

A small hand-written container: ports are registered against factories
and resolved lazily, singletons by default. `create_default()` wires the
production adapters from one AppConfig; tests build a bare Container and
register spies instead.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from .config import AppConfig, get_config


@dataclass
class Container:
    """Dependency injection container.

    Usage:
        # Production
        container = Container.create_default()
        dispatcher = container.resolve(Dispatcher)

        # Testing
        container = Container()
        container.register(WeatherGatewayPort, lambda: FakeWeather())
        weather = container.resolve(WeatherGatewayPort)

    Attributes:
        config: Application configuration
    """

    config: AppConfig = field(default_factory=get_config)

    _factories: Dict[type[Any], Callable[[], Any]] = field(
        default_factory=dict, repr=False
    )
    _singletons: Dict[type[Any], Any] = field(default_factory=dict, repr=False)
    _singleton_types: set[type[Any]] = field(default_factory=set, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    def register(
        self,
        port_type: type[Any],
        factory: Callable[[], Any],
        singleton: bool = True,
    ) -> None:
        """Register a factory for a port type.

        Args:
            port_type: The type (usually a Protocol) to register.
            factory: A callable that creates instances of the type.
            singleton: If True, only one instance is created.
        """
        with self._lock:
            self._factories[port_type] = factory
            self._singletons.pop(port_type, None)
            if singleton:
                self._singleton_types.add(port_type)
            else:
                self._singleton_types.discard(port_type)

    def resolve(self, port_type: type[Any]) -> Any:
        """Resolve an instance of a port type.

        Raises:
            KeyError: If the type is not registered.
        """
        with self._lock:
            if port_type not in self._factories:
                raise KeyError(f"Type not registered: {port_type}")

            if port_type in self._singleton_types:
                if port_type not in self._singletons:
                    self._singletons[port_type] = self._factories[port_type]()
                return self._singletons[port_type]

            return self._factories[port_type]()

    def is_registered(self, port_type: type[Any]) -> bool:
        return port_type in self._factories

    def clear_singletons(self) -> None:
        """Drop cached singletons so the next resolve rebuilds them."""
        with self._lock:
            self._singletons.clear()

    def clear_all(self) -> None:
        with self._lock:
            self._factories.clear()
            self._singletons.clear()
            self._singleton_types.clear()

    @classmethod
    def create_default(cls, config: Optional[AppConfig] = None) -> Container:
        """Create a container with default production bindings.

        Every gateway is built even when its credential is absent; a
        disabled gateway reports ConfigMissing on each call and the
        dispatcher falls back past it.

        Args:
            config: Optional configuration override.

        Returns:
            A configured Container instance.
        """
        from .adapters.cache import InMemoryCache
        from .adapters.geocoding import NominatimGeocoderAdapter
        from .adapters.http import HttpClient
        from .adapters.live import LiveFeedGateway
        from .adapters.llm import OpenAIChatGateway
        from .adapters.nlp import RuleBasedIntentClassifier
        from .adapters.search import GoogleSearchGateway
        from .adapters.stops import CSVStopDirectory
        from .adapters.transport import (
            TransportApiClient,
            TransportApiDepartureGateway,
            TransportApiFareGateway,
            TransportApiJourneyGateway,
        )
        from .adapters.weather import OpenWeatherGateway
        from .ports.cache import CachePort
        from .ports.gateways import (
            DepartureGatewayPort,
            FareGatewayPort,
            JourneyGatewayPort,
            LiveVehicleGatewayPort,
            LLMGatewayPort,
            WeatherGatewayPort,
            WebSearchGatewayPort,
        )
        from .ports.geocoding import GeocoderPort
        from .ports.nlp import IntentClassifierPort
        from .ports.stops import StopDirectoryPort
        from .services import AnswerComposer, Dispatcher

        config = config or get_config()
        container = cls(config=config)

        # Geocoding Cache, the only process-wide mutable state
        cache: InMemoryCache[Any] = InMemoryCache(name="geocode")
        container.register(CachePort, lambda: cache)
        container.register(
            GeocoderPort,
            lambda: NominatimGeocoderAdapter(config.geocoding, cache),
        )

        # Shared HTTP client (one requests.Session per process)
        container.register(HttpClient, lambda: HttpClient(config.http))
        container.register(
            TransportApiClient,
            lambda: TransportApiClient(
                config.transport, container.resolve(HttpClient)
            ),
        )

        # Static data and NLP
        container.register(StopDirectoryPort, lambda: CSVStopDirectory(config.stops))
        container.register(
            IntentClassifierPort,
            lambda: RuleBasedIntentClassifier(
                container.resolve(StopDirectoryPort).codes()
            ),
        )

        # Gateways
        container.register(
            DepartureGatewayPort,
            lambda: TransportApiDepartureGateway(container.resolve(TransportApiClient)),
        )
        container.register(
            FareGatewayPort,
            lambda: TransportApiFareGateway(container.resolve(TransportApiClient)),
        )
        container.register(
            JourneyGatewayPort,
            lambda: TransportApiJourneyGateway(container.resolve(TransportApiClient)),
        )
        container.register(
            LiveVehicleGatewayPort,
            lambda: LiveFeedGateway(config.live, container.resolve(HttpClient)),
        )
        container.register(
            WeatherGatewayPort,
            lambda: OpenWeatherGateway(config.weather, container.resolve(HttpClient)),
        )
        container.register(
            WebSearchGatewayPort,
            lambda: GoogleSearchGateway(config.search, container.resolve(HttpClient)),
        )
        container.register(
            LLMGatewayPort,
            lambda: OpenAIChatGateway(config.llm, container.resolve(HttpClient)),
        )

        # Main service
        def create_dispatcher() -> Dispatcher:
            return Dispatcher(
                classifier=container.resolve(IntentClassifierPort),
                stops=container.resolve(StopDirectoryPort),
                departures=container.resolve(DepartureGatewayPort),
                live_vehicles=container.resolve(LiveVehicleGatewayPort),
                fares=container.resolve(FareGatewayPort),
                journeys=container.resolve(JourneyGatewayPort),
                weather=container.resolve(WeatherGatewayPort),
                web_search=container.resolve(WebSearchGatewayPort),
                llm=container.resolve(LLMGatewayPort),
                geocoder=container.resolve(GeocoderPort),
                composer=AnswerComposer(),
                llm_config=config.llm,
                stops_config=config.stops,
            )

        container.register(Dispatcher, create_dispatcher)

        return container


# Global default container (lazy initialized)
_default_container: Optional[Container] = None
_container_lock = threading.Lock()


def get_container() -> Container:
    """Get the default application container, creating it on first use."""
    global _default_container
    if _default_container is None:
        with _container_lock:
            if _default_container is None:
                _default_container = Container.create_default()
    return _default_container


def reset_container() -> None:
    """Reset the default container.

    Call this in tests to ensure a fresh container.
    """
    global _default_container
    with _container_lock:
        if _default_container is not None:
            _default_container.clear_all()
        _default_container = None
