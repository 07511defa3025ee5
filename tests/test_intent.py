"""Tests for the intent rules table and the rule-based classifier adapter."""

import pytest

from transi.adapters.nlp import RuleBasedIntentClassifier
from transi.domain.models import Intent
from transi.nlp.intent import RULES, IntentRule, detect_intents, normalize

STOP_CODES = frozenset({"a1", "a4", "c2", "e1"})


@pytest.mark.parametrize(
    "text, expected",
    [
        ("next bus from A4", Intent.LIVE_DEPARTURES),
        ("A4", Intent.LIVE_DEPARTURES),
        ("When does the 43 leave?", Intent.LIVE_DEPARTURES),
        ("What time does it depart?", Intent.LIVE_DEPARTURES),
        ("Are there any live buses near me?", Intent.LIVE_VEHICLE_POSITIONS),
        ("where's my bus", Intent.LIVE_VEHICLE_POSITIONS),
        ("How much is a ticket to Exeter?", Intent.FARE_LOOKUP),
        ("what's the fare", Intent.FARE_LOOKUP),
        ("how much is a ticket on the 21", Intent.LIVE_DEPARTURES),
        ("what are the fares", Intent.FARE_LOOKUP),
        ("How do I get to the Barbican?", Intent.JOURNEY_PLANNING),
        ("I want to go to Exeter", Intent.JOURNEY_PLANNING),
        ("What's the weather like in Plymouth?", Intent.WEATHER_LOOKUP),
        ("is it going to rain", Intent.WEATHER_LOOKUP),
        ("is it raining", Intent.WEATHER_LOOKUP),
        ("when are the departures from the station", Intent.LIVE_DEPARTURES),
        ("I lost my wallet on the bus", Intent.GENERAL),
        ("I left my phone on the 21", Intent.GENERAL),
        ("tell me a joke", Intent.GENERAL),
    ],
)
def test_primary_intent(text, expected):
    assert detect_intents(text, STOP_CODES)[0] == expected


class TestDetectIntents:
    """Ordering and edge cases of the ranked intent tuple."""

    @pytest.mark.parametrize("text", ["", "   ", "\t\n"])
    def test_empty_defaults_to_general(self, text):
        assert detect_intents(text, STOP_CODES) == (Intent.GENERAL,)

    def test_general_always_last(self):
        intents = detect_intents("next bus from A4", STOP_CODES)

        assert intents == (Intent.LIVE_DEPARTURES, Intent.GENERAL)

    def test_all_matches_kept_in_priority_order(self):
        intents = detect_intents("are there buses near me", STOP_CODES)

        assert intents == (
            Intent.LIVE_VEHICLE_POSITIONS,
            Intent.LIVE_DEPARTURES,
            Intent.GENERAL,
        )

    def test_lost_property_outranks_stop_code(self):
        intents = detect_intents("I lost my phone at stop A4", STOP_CODES)

        assert intents[0] == Intent.GENERAL
        assert intents[1] == Intent.LIVE_DEPARTURES

    def test_stop_code_needs_known_codes(self):
        assert detect_intents("A4")[0] == Intent.GENERAL

    def test_stop_code_outranks_other_rules(self):
        intents = detect_intents("weather at A4", STOP_CODES)

        assert intents[0] == Intent.LIVE_DEPARTURES
        assert Intent.WEATHER_LOOKUP in intents

    @pytest.mark.parametrize(
        "text",
        ["train times please", "best costa coffee", "was there a rainbow", "business park"],
    )
    def test_keywords_match_whole_words_only(self, text):
        assert detect_intents(text) == (Intent.GENERAL,)

    def test_route_number_ranks_with_departures(self):
        intents = detect_intents("how much is a ticket on the 21")

        assert intents == (Intent.LIVE_DEPARTURES, Intent.FARE_LOOKUP, Intent.GENERAL)

    def test_deterministic(self):
        text = "How much is the 43 bus to Exeter?"

        assert detect_intents(text, STOP_CODES) == detect_intents(text, STOP_CODES)

    def test_normalize(self):
        assert normalize("  Next   BUS\tfrom A4 ") == "next bus from a4"

    def test_custom_rules_table(self):
        rules = (IntentRule(Intent.FARE_LOOKUP, ("quid",)),)

        assert detect_intents("how many quid", rules=rules)[0] == Intent.FARE_LOOKUP
        assert detect_intents("hello", rules=rules) == (Intent.GENERAL,)

    def test_table_starts_with_lost_property(self):
        assert RULES[0].intent == Intent.GENERAL
        assert RULES[0].matches("i lost my wallet")


class TestRuleBasedIntentClassifier:
    def test_uses_stop_codes(self):
        classifier = RuleBasedIntentClassifier(STOP_CODES)

        assert classifier.classify("c2")[0] == Intent.LIVE_DEPARTURES

    def test_without_stop_codes(self):
        classifier = RuleBasedIntentClassifier()

        assert classifier.classify("c2") == (Intent.GENERAL,)
