"""Tests for the Dispatcher: routing, parameter resolution and the fallback chain."""

import dataclasses
from unittest.mock import MagicMock

import pytest

from transi.adapters.transport import TransportApiClient, TransportApiDepartureGateway
from transi.config import TransportApiConfig
from transi.domain.errors import ConfigMissing, UpstreamMalformed, UpstreamUnavailable
from transi.domain.models import (
    Completion,
    Departure,
    DepartureBoard,
    Empty,
    Failure,
    FareQuote,
    GeoLocation,
    NearbyStop,
    Place,
    Question,
    SearchHit,
    SearchResult,
    Success,
    Vehicle,
    VehicleList,
    WeatherReport,
)
from transi.services import APOLOGY, GREETING, NO_DATA
from transi.services.dispatcher import (
    LOCATION_PROMPT,
    ORIGIN_PROMPT,
    STOP_PROMPT,
    WEATHER_PROMPT,
)

ROYAL_PARADE_A4 = GeoLocation(50.370230, -4.143010)
EXETER = GeoLocation(50.7184, -3.5339)

SCENARIO_ANSWER = (
    "Here's what I found — upcoming buses from Royal Parade Stop A4: "
    "43 to Royal Parade at 14:05."
)


def board_for_a4():
    return DepartureBoard(
        atco_code="1180PZA004",
        stop_name="Royal Parade Stop A4",
        routes=(("1", (Departure("43", "Royal Parade", "14:05"),)),),
    )


def search_success(snippet="Buses run every 10 minutes from Royal Parade."):
    return Success(
        SearchResult(
            query="q",
            hits=(SearchHit(title="Timetables", link="https://example.org", snippet=snippet),),
        ),
        source="google",
    )


class TestGreeting:
    """Empty questions short-circuit before any gateway."""

    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    def test_empty_question_gets_greeting(self, dispatcher, gateway_calls, text):
        answer = dispatcher.answer(Question(text=text))

        assert answer.text == GREETING
        assert gateway_calls() == 0

    def test_missing_text_via_ask_gets_greeting(self, dispatcher, gateway_calls):
        answer = dispatcher.ask(None, lat="50.37", lon="-4.14")

        assert answer.text == GREETING
        assert gateway_calls() == 0


class TestDepartures:
    """Departure questions resolve a stop before calling the gateway."""

    @pytest.mark.parametrize(
        "text, atco_code, name",
        [
            ("next bus from A4", "1180PZA004", "Royal Parade Stop A4"),
            ("When does the bus leave C2?", "1180PZC002", "Mayflower Street Stop C2"),
            ("departures at e1 please", "1180PZE001", "Barbican Stop E1"),
        ],
    )
    def test_stop_code_maps_to_atco_code(
        self, dispatcher, gateways, text, atco_code, name
    ):
        dispatcher.answer(Question(text=text))

        gateways["departures"].fetch.assert_called_once_with(atco_code, stop_name=name)

    def test_scenario_answer_text(self, dispatcher, gateways):
        gateways["departures"].fetch.return_value = Success(
            board_for_a4(), source="transportapi"
        )

        answer = dispatcher.answer(Question(text="next bus from A4"))

        assert answer.text == SCENARIO_ANSWER
        assert answer.source == "transportapi"
        assert answer.data["departures"]["1"][0]["line_name"] == "43"
        gateways["web_search"].fetch.assert_not_called()
        gateways["llm"].fetch.assert_not_called()

    def test_scenario_through_transport_gateway(self, dispatcher):
        http = MagicMock()
        http.get_json.return_value = {
            "departures": {
                "1": [
                    {
                        "line_name": "43",
                        "direction": "Royal Parade",
                        "expected_departure_time": "14:05",
                    }
                ]
            }
        }
        client = TransportApiClient(
            TransportApiConfig(app_id="id", app_key="key"), http
        )
        real = dataclasses.replace(
            dispatcher, departures=TransportApiDepartureGateway(client)
        )

        answer = real.answer(Question(text="next bus from A4"))

        assert answer.text == SCENARIO_ANSWER
        url = http.get_json.call_args[0][0]
        assert url.endswith("/bus/stop/1180PZA004/live.json")

    def test_idempotent(self, dispatcher, gateways):
        gateways["departures"].fetch.return_value = Success(
            board_for_a4(), source="transportapi"
        )
        question = Question(text="next bus from A4")

        first = dispatcher.answer(question)
        second = dispatcher.answer(question)

        assert first.text == second.text
        assert first == second

    def test_no_stop_and_no_location_asks_back(self, dispatcher, gateway_calls):
        answer = dispatcher.answer(Question(text="when is the next bus?"))

        assert answer.text == STOP_PROMPT
        assert gateway_calls() == 0

    def test_location_uses_nearest_known_stop(self, dispatcher, gateways):
        dispatcher.answer(
            Question(text="when is the next bus?", location=ROYAL_PARADE_A4)
        )

        gateways["departures"].fetch.assert_called_once_with(
            "1180PZA004", stop_name="Royal Parade Stop A4"
        )
        gateways["departures"].nearby.assert_not_called()

    def test_far_location_uses_remote_nearby_lookup(self, dispatcher, gateways):
        gateways["departures"].nearby.return_value = Success(
            (
                NearbyStop("EXD", "Exeter St Davids", 50.729, -3.543, is_bus_stop=False),
                NearbyStop("1100DEA57098", "Exeter Bus Station", 50.723, -3.526),
            ),
            source="transportapi",
        )

        dispatcher.answer(Question(text="when is the next bus?", location=EXETER))

        gateways["departures"].nearby.assert_called_once_with(EXETER)
        gateways["departures"].fetch.assert_called_once_with(
            "1100DEA57098", stop_name="Exeter Bus Station"
        )


class TestFallbackChain:
    """primary -> web search -> LLM, advancing on Empty or Failure."""

    def _record(self, gateways, order):
        for key in ("departures", "web_search", "llm"):
            gateway = gateways[key]
            result = gateway.fetch.return_value

            def side_effect(*args, _key=key, _result=result, **kwargs):
                order.append(_key)
                return _result

            gateway.fetch.side_effect = side_effect

    def test_primary_empty_goes_to_web_search_first(self, dispatcher, gateways):
        gateways["web_search"].fetch.return_value = search_success()
        order = []
        self._record(gateways, order)

        answer = dispatcher.answer(Question(text="next bus from A4"))

        assert order == ["departures", "web_search"]
        assert answer.text == (
            "Here's what I found online: Buses run every 10 minutes from Royal Parade."
        )
        assert answer.source == "google"

    def test_llm_only_after_web_search_fails(self, dispatcher, gateways):
        gateways["web_search"].fetch.return_value = Failure("google", "HTTP 500")
        gateways["llm"].fetch.return_value = Success(
            Completion("Try the 43 from Royal Parade."), source="openai"
        )
        order = []
        self._record(gateways, order)

        answer = dispatcher.answer(Question(text="next bus from A4"))

        assert order == ["departures", "web_search", "llm"]
        assert answer.text == "Try the 43 from Royal Parade."

    def test_timeout_scenario(self, dispatcher, gateways):
        gateways["departures"].fetch.side_effect = UpstreamUnavailable(
            "transportapi timed out", gateway="transportapi", is_timeout=True
        )
        gateways["web_search"].fetch.return_value = Empty(source="google")
        gateways["llm"].fetch.return_value = Success(
            Completion("The 43 usually leaves Royal Parade every 10 minutes."),
            source="openai",
        )

        answer = dispatcher.answer(Question(text="next bus from A4"))

        gateways["web_search"].fetch.assert_called_once_with("next bus from A4")
        assert gateways["llm"].fetch.call_count == 1
        assert answer.text == "The 43 usually leaves Royal Parade every 10 minutes."

    def test_malformed_payload_advances(self, dispatcher, gateways):
        gateways["departures"].fetch.side_effect = UpstreamMalformed(
            "bad", gateway="transportapi"
        )
        gateways["web_search"].fetch.return_value = search_success()

        answer = dispatcher.answer(Question(text="next bus from A4"))

        assert answer.source == "google"

    def test_unexpected_gateway_error_advances(self, dispatcher, gateways):
        gateways["departures"].fetch.side_effect = KeyError("departures")
        gateways["web_search"].fetch.return_value = search_success()

        answer = dispatcher.answer(Question(text="next bus from A4"))

        assert answer.source == "google"

    def test_disabled_gateways_fall_through_to_llm(self, dispatcher, gateways):
        missing = ConfigMissing("disabled", gateway="x", setting_name="KEY")
        gateways["departures"].fetch.side_effect = missing
        gateways["web_search"].fetch.side_effect = missing
        gateways["llm"].fetch.return_value = Success(Completion("Hello!"), source="openai")

        answer = dispatcher.answer(Question(text="next bus from A4"))

        assert answer.text == "Hello!"

    def test_search_without_text_advances_to_llm(self, dispatcher, gateways):
        gateways["web_search"].fetch.return_value = search_success(snippet="")
        gateways["llm"].fetch.return_value = Success(
            Completion("Lost property is held at the travel centre."), source="openai"
        )

        answer = dispatcher.answer(Question(text="I lost my phone"))

        assert gateways["llm"].fetch.call_count == 1
        assert answer.text == "Lost property is held at the travel centre."
        assert answer.source == "openai"

    def test_blank_completion_at_last_stage_gives_no_data(self, dispatcher, gateways):
        gateways["llm"].fetch.return_value = Success(Completion("   "), source="openai")

        answer = dispatcher.answer(Question(text="tell me something about Plymouth"))

        assert answer.text == NO_DATA

    def test_last_stage_empty_gives_no_data_answer(self, dispatcher):
        answer = dispatcher.answer(Question(text="tell me something about Plymouth"))

        assert answer.text == NO_DATA

    def test_last_stage_failure_gives_apology(self, dispatcher, gateways):
        gateways["llm"].fetch.side_effect = UpstreamUnavailable(
            "openai answered HTTP 503", gateway="openai", status_code=503
        )

        answer = dispatcher.answer(Question(text="tell me something about Plymouth"))

        assert answer.text == APOLOGY

    def test_general_question_skips_primary(self, dispatcher, gateways):
        dispatcher.answer(Question(text="I lost my wallet on the bus"))

        gateways["departures"].fetch.assert_not_called()
        gateways["web_search"].fetch.assert_called_once_with(
            "I lost my wallet on the bus"
        )
        gateways["llm"].fetch.assert_called_once()

    def test_uncaught_error_becomes_apology(self, dispatcher):
        broken = MagicMock()
        broken.classify.side_effect = RuntimeError("boom")
        faulty = dataclasses.replace(dispatcher, classifier=broken)

        answer = faulty.answer(Question(text="next bus from A4"))

        assert answer.text == APOLOGY


class TestLLMStage:
    def test_persona_prompt_carries_reverse_geocoded_place(
        self, dispatcher, gateways, geocoder
    ):
        geocoder.reverse_geocode.return_value = Place("Plymouth", ROYAL_PARADE_A4)
        gateways["llm"].fetch.return_value = Success(Completion("Hi"), source="openai")

        dispatcher.answer(
            Question(text="what's good to see around here?", location=ROYAL_PARADE_A4)
        )

        system_prompt, user_text = gateways["llm"].fetch.call_args[0]
        assert "Transi Autopilot" in system_prompt
        assert "Plymouth" in system_prompt
        assert user_text == "what's good to see around here?"

    def test_search_summary_replaces_snippet(self, dispatcher, gateways):
        summarising = dataclasses.replace(dispatcher, summarise_search=True)
        gateways["web_search"].fetch.return_value = search_success()
        gateways["llm"].fetch.return_value = Success(
            Completion("Buses leave Royal Parade about every ten minutes."),
            source="openai",
        )

        answer = summarising.answer(Question(text="I lost my phone"))

        assert answer.text == "Buses leave Royal Parade about every ten minutes."
        args, kwargs = gateways["llm"].fetch.call_args
        assert args[0] is None
        assert "Buses run every 10 minutes" in args[1]
        assert kwargs == {"max_tokens": 150, "temperature": 0.4}

    def test_failed_summary_keeps_snippet(self, dispatcher, gateways):
        summarising = dataclasses.replace(dispatcher, summarise_search=True)
        gateways["web_search"].fetch.return_value = search_success(
            "Lost property is at the travel centre."
        )
        gateways["llm"].fetch.side_effect = UpstreamUnavailable("down", gateway="openai")

        answer = summarising.answer(Question(text="I lost my phone"))

        assert answer.text == (
            "Here's what I found online: Lost property is at the travel centre."
        )


class TestOtherIntents:
    def test_live_vehicles_need_location(self, dispatcher, gateway_calls):
        answer = dispatcher.answer(Question(text="where's my bus?"))

        assert answer.text == LOCATION_PROMPT
        assert gateway_calls() == 0

    def test_live_vehicles_answer(self, dispatcher, gateways):
        gateways["live_vehicles"].fetch.return_value = Success(
            VehicleList(
                (
                    Vehicle("v1", "21", 50.371, -4.143, 90.0, 0.12),
                    Vehicle("v2", "43", 50.375, -4.140, None, 0.6),
                ),
                radius_km=1.5,
            ),
            source="bods",
        )

        answer = dispatcher.answer(
            Question(text="any live buses near me?", location=ROYAL_PARADE_A4)
        )

        gateways["live_vehicles"].fetch.assert_called_once_with(ROYAL_PARADE_A4)
        assert answer.text == (
            "There are 2 live buses within 1.5 km. "
            "The nearest is the 21, about 120 metres away."
        )
        assert [bus["id"] for bus in answer.data["buses"]] == ["v1", "v2"]

    def test_fare_lookup(self, dispatcher, gateways):
        gateways["fares"].fetch.return_value = Success(
            FareQuote("Adult single", 2.5), source="fares"
        )

        answer = dispatcher.answer(Question(text="How much is a ticket to Exeter?"))

        gateways["fares"].fetch.assert_called_once_with(
            destination="Exeter", origin=None, line=None
        )
        assert answer.text == "The cheapest fare I found is Adult single at £2.50."

    def test_journey_geocodes_destination(self, dispatcher, gateways, geocoder):
        barbican = Place("Barbican", GeoLocation(50.3679, -4.1355))
        geocoder.geocode.return_value = barbican

        dispatcher.answer(
            Question(text="How do I get to the Barbican?", location=ROYAL_PARADE_A4)
        )

        geocoder.geocode.assert_called_once_with("Barbican")
        gateways["journeys"].fetch.assert_called_once_with(ROYAL_PARADE_A4, barbican)

    def test_journey_without_origin_asks_back(self, dispatcher, gateway_calls):
        answer = dispatcher.answer(Question(text="How do I get to the Barbican?"))

        assert answer.text == ORIGIN_PROMPT
        assert gateway_calls() == 0

    def test_unresolvable_destination_skips_primary(self, dispatcher, gateways):
        dispatcher.answer(
            Question(text="How do I get to Nowhereville?", location=ROYAL_PARADE_A4)
        )

        gateways["journeys"].fetch.assert_not_called()
        gateways["web_search"].fetch.assert_called_once()

    def test_weather_for_named_place(self, dispatcher, gateways, geocoder):
        geocoder.geocode.return_value = Place("Exeter", EXETER)
        gateways["weather"].fetch.return_value = Success(
            WeatherReport("Exeter", 14.4, "light rain"), source="openweathermap"
        )

        answer = dispatcher.answer(Question(text="What's the weather in Exeter?"))

        gateways["weather"].fetch.assert_called_once_with(EXETER, place_name="Exeter")
        assert answer.text == "It's currently 14°C with light rain in Exeter."

    def test_weather_without_place_asks_back(self, dispatcher, gateway_calls):
        answer = dispatcher.answer(Question(text="what's the weather like?"))

        assert answer.text == WEATHER_PROMPT
        assert gateway_calls() == 0


class TestResolveStop:
    def test_short_code(self, dispatcher):
        assert dispatcher.resolve_stop("a4") == ("1180PZA004", "Royal Parade Stop A4")

    def test_raw_atco_code_passes_through(self, dispatcher):
        assert dispatcher.resolve_stop("1100DEA57098") == ("1100DEA57098", None)
