"""Answer composer - turns gateway results into speakable text.

Pure formatting: no network, no logging, no state. Every method returns a
fresh `Answer`, and an `Empty` result still yields a polite sentence
rather than an empty string.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..domain.errors import InputError
from ..domain.models import (
    Answer,
    Completion,
    DepartureBoard,
    Empty,
    Failure,
    FareQuote,
    GatewayResult,
    Intent,
    JourneySummary,
    NearbyStop,
    SearchResult,
    Success,
    VehicleList,
    WeatherReport,
)

GREETING = "Welcome to Transi Autopilot Assistant. How can I help you today?"
APOLOGY = (
    "Sorry, something went wrong while looking that up. "
    "Please try again in a moment."
)
NO_DATA = "Sorry, I couldn’t find that information right now."

NO_DATA_BY_INTENT: Mapping[Intent, str] = {
    Intent.LIVE_DEPARTURES: "I couldn't find any upcoming buses for that stop right now.",
    Intent.LIVE_VEHICLE_POSITIONS: "I can't see any live buses near you at the moment.",
    Intent.FARE_LOOKUP: "I couldn't find a fare for that trip.",
    Intent.JOURNEY_PLANNING: "I couldn't find a journey to that destination.",
    Intent.WEATHER_LOOKUP: "I couldn't get the weather for that place right now.",
    Intent.GENERAL: NO_DATA,
}

CURRENCY_SYMBOLS = {"GBP": "£", "EUR": "€", "USD": "$"}


def format_distance(distance_km: float) -> str:
    """Speakable distance: metres below 1 km, one decimal above."""
    if distance_km < 1:
        metres = int(round(distance_km * 1000 / 10) * 10)
        return f"{metres} metres"
    return f"{distance_km:.1f} km"


def format_price(price: float, currency: str = "GBP") -> str:
    symbol = CURRENCY_SYMBOLS.get(currency.upper())
    if symbol:
        return f"{symbol}{price:.2f}"
    return f"{price:.2f} {currency}"


@dataclass(frozen=True)
class AnswerComposer:
    """Render Answers for each intent and gateway payload.

    Attributes:
        greeting_text: Canned reply to an empty question
        apology_text: Reply when every stage failed
        search_hint_chars: Character budget for a raw snippet answer
    """

    greeting_text: str = GREETING
    apology_text: str = APOLOGY
    search_hint_chars: int = 320

    def greeting(self) -> Answer:
        return Answer(text=self.greeting_text)

    def apology(self) -> Answer:
        return Answer(text=self.apology_text)

    def clarify(self, error: InputError) -> Answer:
        """Answer a question that lacks a required parameter."""
        return Answer(text=error.prompt or error.message)

    def no_data(self, intent: Intent, source: Optional[str] = None) -> Answer:
        return Answer(text=NO_DATA_BY_INTENT.get(intent, NO_DATA), source=source or None)

    def compose(self, intent: Intent, result: GatewayResult) -> Answer:
        """Render one gateway result.

        Args:
            intent: Intent the result was fetched for.
            result: Success, Empty or Failure.

        Returns:
            Answer with display text, source and optional structured data.
        """
        if isinstance(result, Failure):
            return self.apology()
        if isinstance(result, Empty):
            return self.no_data(intent, result.source)

        answer = self.render(result)
        if answer is None:
            return self.no_data(intent, result.source)
        return answer

    def render(self, result: Success) -> Optional[Answer]:
        """Answer for a successful result, or None when it has nothing to say."""
        text, data = self._render(result.payload)
        if text is None:
            return None
        return Answer(text=text, source=result.source or None, data=data)

    def _render(self, payload: Any) -> tuple[Optional[str], Optional[Mapping[str, Any]]]:
        if isinstance(payload, DepartureBoard):
            return self.departures_text(payload), payload.as_dict()
        if isinstance(payload, VehicleList):
            return self.vehicles_text(payload), payload.as_dict()
        if isinstance(payload, FareQuote):
            return self.fare_text(payload), None
        if isinstance(payload, JourneySummary):
            return self.journey_text(payload), None
        if isinstance(payload, WeatherReport):
            return self.weather_text(payload), None
        if isinstance(payload, SearchResult):
            return self.search_text(payload), None
        if isinstance(payload, Completion):
            return (payload.text.strip() or None), None
        if isinstance(payload, tuple) and all(isinstance(s, NearbyStop) for s in payload):
            return self.nearby_text(payload), {"stops": [s.as_dict() for s in payload]}
        return None, None

    def departures_text(self, board: DepartureBoard) -> Optional[str]:
        items = [
            f"{dep.line_name} to {dep.direction} at {dep.expected_departure_time}"
            for dep in board.departures
        ]
        if not items:
            return None
        listing = ", ".join(items)
        return f"Here's what I found — upcoming buses from {board.stop_name}: {listing}."

    def vehicles_text(self, vehicles: VehicleList) -> Optional[str]:
        if not vehicles.vehicles:
            return None
        nearest = vehicles.vehicles[0]
        count = len(vehicles.vehicles)
        noun = "bus" if count == 1 else "buses"
        verb = "is" if count == 1 else "are"
        return (
            f"There {verb} {count} live {noun} within {vehicles.radius_km:g} km. "
            f"The nearest is the {nearest.line}, about "
            f"{format_distance(nearest.distance_km)} away."
        )

    def fare_text(self, fare: FareQuote) -> str:
        price = format_price(fare.price, fare.currency)
        return f"The cheapest fare I found is {fare.name} at {price}."

    def journey_text(self, journey: JourneySummary) -> str:
        leg = journey.first_leg
        if leg.line_name:
            ride = f"take the {leg.line_name} {leg.mode}"
        else:
            ride = f"go by {leg.mode}"
        parts = [f"To get to {journey.destination_name}, {ride}"]
        if leg.direction:
            parts.append(f" towards {leg.direction}")
        if leg.from_name:
            parts.append(f" from {leg.from_name}")
        if leg.departure_time:
            parts.append(f" at {leg.departure_time}")
        text = "".join(parts) + "."
        if journey.duration_minutes:
            text += f" The whole journey takes about {journey.duration_minutes} minutes"
            if journey.legs > 1:
                text += f" over {journey.legs} legs"
            text += "."
        return text

    def weather_text(self, report: WeatherReport) -> str:
        return (
            f"It's currently {report.temperature_c:.0f}°C with "
            f"{report.description} in {report.place_name}."
        )

    def search_text(self, result: SearchResult) -> Optional[str]:
        if result.summary:
            return result.summary.strip()
        snippet = next((hit.snippet for hit in result.hits if hit.snippet), "")
        material = snippet or (result.page_excerpt or "")
        if not material:
            return None
        material = " ".join(material.split())
        if len(material) > self.search_hint_chars:
            material = material[: self.search_hint_chars].rsplit(" ", 1)[0] + "…"
        return f"Here's what I found online: {material}"

    def nearby_text(self, stops: tuple[NearbyStop, ...]) -> Optional[str]:
        if not stops:
            return None
        closest = stops[0]
        return f"The closest stop is {closest.name}."
