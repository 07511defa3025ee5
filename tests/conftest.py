"""Shared fixtures: spy gateways and a fully wired Dispatcher."""

from unittest.mock import MagicMock

import pytest

from transi.adapters.nlp import RuleBasedIntentClassifier
from transi.adapters.stops import CSVStopDirectory
from transi.config import LLMConfig, StopsConfig, reset_config
from transi.container import reset_container
from transi.domain.models import Empty
from transi.services import AnswerComposer, Dispatcher


def make_gateway(name, result=None, enabled=True):
    """MagicMock gateway whose fetch() returns `result` (Empty by default)."""
    gateway = MagicMock()
    gateway.name = name
    gateway.enabled = enabled
    gateway.fetch.return_value = result if result is not None else Empty(source=name)
    gateway.nearby.return_value = Empty(source=name)
    return gateway


@pytest.fixture(autouse=True)
def _fresh_singletons():
    reset_config()
    reset_container()
    yield
    reset_config()
    reset_container()


@pytest.fixture
def stops():
    return CSVStopDirectory(StopsConfig())


@pytest.fixture
def gateways():
    return {
        "departures": make_gateway("transportapi"),
        "live_vehicles": make_gateway("bods"),
        "fares": make_gateway("fares"),
        "journeys": make_gateway("transportapi"),
        "weather": make_gateway("openweathermap"),
        "web_search": make_gateway("google"),
        "llm": make_gateway("openai"),
    }


@pytest.fixture
def geocoder():
    geocoder = MagicMock()
    geocoder.geocode.return_value = None
    geocoder.reverse_geocode.return_value = None
    return geocoder


@pytest.fixture
def dispatcher(stops, gateways, geocoder):
    return Dispatcher(
        classifier=RuleBasedIntentClassifier(stops.codes()),
        stops=stops,
        geocoder=geocoder,
        composer=AnswerComposer(),
        llm_config=LLMConfig(),
        stops_config=StopsConfig(),
        summarise_search=False,
        **gateways,
    )


@pytest.fixture
def gateway_calls(gateways):
    """Callable returning the number of fetch/nearby calls across every spy."""

    def count():
        return sum(g.fetch.call_count + g.nearby.call_count for g in gateways.values())

    return count
