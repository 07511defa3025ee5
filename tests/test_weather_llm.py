"""Tests for the weather and LLM gateways."""

from unittest.mock import MagicMock

import pytest

from transi.adapters.llm import OpenAIChatGateway
from transi.adapters.weather import OpenWeatherGateway
from transi.config import LLMConfig, WeatherConfig
from transi.domain.errors import ConfigMissing, UpstreamMalformed
from transi.domain.models import Empty, GeoLocation, Success

HERE = GeoLocation(50.3703, -4.1430)


class TestWeather:
    def make_gateway(self, body):
        http = MagicMock()
        http.get_json.return_value = body
        return OpenWeatherGateway(WeatherConfig(api_key="key"), http), http

    def test_current_conditions(self):
        gateway, http = self.make_gateway(
            {
                "name": "Plymouth",
                "main": {"temp": 13.6},
                "weather": [{"description": "light rain"}],
            }
        )

        result = gateway.fetch(HERE)

        assert isinstance(result, Success)
        report = result.payload
        assert report.place_name == "Plymouth"
        assert report.temperature_c == 13.6
        assert report.description == "light rain"
        params = http.get_json.call_args[1]["params"]
        assert params["units"] == "metric"
        assert params["appid"] == "key"

    def test_falls_back_to_given_place_name(self):
        gateway, _ = self.make_gateway({"main": {"temp": 9}, "weather": []})

        report = gateway.fetch(HERE, place_name="Dartmoor").payload

        assert report.place_name == "Dartmoor"
        assert report.description == ""

    def test_missing_temperature_is_malformed(self):
        gateway, _ = self.make_gateway({"name": "Plymouth", "weather": []})

        with pytest.raises(UpstreamMalformed):
            gateway.fetch(HERE)

    def test_requires_api_key(self):
        gateway = OpenWeatherGateway(WeatherConfig(api_key=None), MagicMock())

        with pytest.raises(ConfigMissing):
            gateway.fetch(HERE)


class TestLLM:
    def make_gateway(self, body, **overrides):
        http = MagicMock()
        http.post_json.return_value = body
        return OpenAIChatGateway(LLMConfig(api_key="sk-test", **overrides), http), http

    def test_completion(self):
        gateway, http = self.make_gateway(
            {"model": "gpt-4o-mini", "choices": [{"message": {"content": "  Hello there.  "}}]}
        )

        result = gateway.fetch("system", "hi")

        assert result.payload.text == "Hello there."
        assert result.payload.model == "gpt-4o-mini"
        url, body = http.post_json.call_args[0]
        kwargs = http.post_json.call_args[1]
        assert body["messages"] == [
            {"role": "system", "content": "system"},
            {"role": "user", "content": "hi"},
        ]
        assert body["max_tokens"] == 250
        assert body["temperature"] == 0.6
        assert kwargs["headers"] == {"Authorization": "Bearer sk-test"}

    def test_without_system_prompt_and_overrides(self):
        gateway, http = self.make_gateway({"choices": [{"message": {"content": "ok"}}]})

        gateway.fetch(None, "summarise", max_tokens=150, temperature=0.0)

        body = http.post_json.call_args[0][1]
        assert body["messages"] == [{"role": "user", "content": "summarise"}]
        assert body["max_tokens"] == 150
        assert body["temperature"] == 0.0

    @pytest.mark.parametrize(
        "body",
        [
            {"choices": []},
            {"choices": [{"message": {"content": "   "}}]},
            {"choices": [{"message": {}}]},
        ],
    )
    def test_empty_completion(self, body):
        gateway, _ = self.make_gateway(body)

        assert isinstance(gateway.fetch(None, "hi"), Empty)

    def test_malformed_payload(self):
        gateway, _ = self.make_gateway({"choices": [{"no_message": True}]})

        with pytest.raises(UpstreamMalformed):
            gateway.fetch(None, "hi")

    def test_requires_api_key(self):
        gateway = OpenAIChatGateway(LLMConfig(api_key=None), MagicMock())

        assert not gateway.enabled
        with pytest.raises(ConfigMissing):
            gateway.fetch(None, "hi")
