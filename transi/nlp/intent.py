"""Intent detection for transit questions.

A single table of keyword rules evaluated in a fixed priority order. The
first matching rule decides the primary intent; every other matching
rule is kept, in order, as a lower-ranked candidate, and GENERAL always
closes the list.

Example
-------
    >>> detect_intents("next bus from A4", stop_codes={"a4"})
    (<Intent.LIVE_DEPARTURES: 1>, <Intent.GENERAL: 6>)
    >>> detect_intents("what's the weather like?")
    (<Intent.WEATHER_LOOKUP: 5>, <Intent.GENERAL: 6>)
    >>> detect_intents("I lost my wallet on the bus")
    (<Intent.GENERAL: 6>, <Intent.LIVE_DEPARTURES: 1>)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import AbstractSet, Iterable, Optional, Pattern, Tuple

from ..domain.models import Intent


@dataclass(frozen=True)
class IntentRule:
    """One row of the routing table.

    Attributes:
        intent: Intent emitted when the rule matches
        keywords: Whole words or phrases; plurals are listed explicitly
        pattern: Optional extra regex tested against the normalized text
    """

    intent: Intent
    keywords: Tuple[str, ...] = ()
    pattern: Optional[Pattern[str]] = None

    def __post_init__(self) -> None:
        if self.keywords:
            alternatives = "|".join(re.escape(k) for k in self.keywords)
            object.__setattr__(self, "_keyword_re", re.compile(rf"\b(?:{alternatives})\b"))
        else:
            object.__setattr__(self, "_keyword_re", None)

    def matches(self, text: str) -> bool:
        keyword_re = getattr(self, "_keyword_re")
        if keyword_re is not None and keyword_re.search(text):
            return True
        return bool(self.pattern and self.pattern.search(text))


ROUTE_NUMBER_RE = re.compile(r"\b\d{1,3}[a-z]?\b")

# Order matters: first match wins.
RULES: Tuple[IntentRule, ...] = (
    IntentRule(Intent.GENERAL, ("lost", "wallet", "wallets", "phone", "phones", "left my")),
    IntentRule(
        Intent.LIVE_VEHICLE_POSITIONS,
        (
            "live bus",
            "live buses",
            "buses near",
            "bus near",
            "buses around",
            "where is the bus",
            "where's the bus",
            "where is my bus",
            "where's my bus",
            "track",
            "tracking",
            "tracker",
        ),
    ),
    IntentRule(
        Intent.LIVE_DEPARTURES,
        (
            "bus",
            "buses",
            "depart",
            "departs",
            "departing",
            "departure",
            "departures",
            "leave",
            "leaves",
            "leaving",
            "timetable",
            "timetables",
        ),
        pattern=ROUTE_NUMBER_RE,
    ),
    IntentRule(
        Intent.FARE_LOOKUP,
        ("fare", "fares", "price", "prices", "ticket", "tickets", "how much", "cost", "costs"),
    ),
    IntentRule(
        Intent.JOURNEY_PLANNING,
        ("go to", "get to", "how do i", "directions", "route to", "travel to"),
    ),
    IntentRule(
        Intent.WEATHER_LOOKUP,
        ("weather", "temperature", "forecast", "rain", "raining", "rainy"),
    ),
)


def normalize(text: str) -> str:
    """Lower-case and collapse whitespace."""
    return " ".join(text.split()).lower()


def _mentions_stop_code(text: str, stop_codes: AbstractSet[str]) -> bool:
    if not stop_codes:
        return False
    return any(token in stop_codes for token in re.findall(r"[a-z0-9]+", text))


def _dedupe(intents: Iterable[Intent]) -> Tuple[Intent, ...]:
    seen: list[Intent] = []
    for intent in intents:
        if intent not in seen:
            seen.append(intent)
    return tuple(seen)


def detect_intents(
    question: str,
    stop_codes: AbstractSet[str] = frozenset(),
    rules: Tuple[IntentRule, ...] = RULES,
) -> Tuple[Intent, ...]:
    """Rank the intents of a question.

    Parameters
    ----------
    question : str
        Raw question text.
    stop_codes : set of str
        Known short stop codes, lower-cased. A question naming one of them
        is a departures question unless it is about lost property.
    rules : tuple of IntentRule
        Routing table, highest priority first.

    Returns
    -------
    tuple of Intent
        Candidate intents, primary first, GENERAL last. Empty or
        whitespace-only input yields ``(GENERAL,)``.
    """
    text = normalize(question)
    if not text:
        return (Intent.GENERAL,)

    matched = [rule.intent for rule in rules if rule.matches(text)]
    if _mentions_stop_code(text, stop_codes):
        # Stop codes outrank everything but the lost-property rule.
        lost_property = bool(matched) and matched[0] is Intent.GENERAL
        position = 1 if lost_property else 0
        matched.insert(position, Intent.LIVE_DEPARTURES)

    matched.append(Intent.GENERAL)
    return _dedupe(matched)
