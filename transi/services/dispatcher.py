"""Dispatcher - Question in, exactly one Answer out.

Orchestrates classifier, gateways and composer:

1. Empty question -> greeting, no gateway touched.
2. Classify once and resolve the parameters of the top intent (stop,
   location, places). A missing parameter is answered with a clarifying
   prompt; an unresolvable one skips the primary stage.
3. Walk the fallback chain: primary gateway -> web search -> LLM. The
   first Success that renders to text is returned. Empty, Failure or a
   Success with nothing to say advances.
4. When the chain runs out, the last stage's result is composed: Empty
   gives a polite no-data answer, Failure the generic apology.

The dispatcher holds only read-only collaborators, so one instance can
serve any number of concurrent requests.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from ..config import LLMConfig, StopsConfig, get_config
from ..domain.errors import ConfigMissing, InputError, TransiError
from ..domain.models import (
    Answer,
    Completion,
    Empty,
    Failure,
    GatewayResult,
    GeoLocation,
    Intent,
    NearbyStop,
    Place,
    Question,
    SearchResult,
    StopReference,
    Success,
)
from ..nlp.places import extract_destination, extract_line, extract_origin, extract_place
from ..ports.gateways import (
    DepartureGatewayPort,
    FareGatewayPort,
    JourneyGatewayPort,
    LiveVehicleGatewayPort,
    LLMGatewayPort,
    WeatherGatewayPort,
    WebSearchGatewayPort,
)
from ..ports.geocoding import GeocoderPort
from ..ports.nlp import IntentClassifierPort
from ..ports.stops import StopDirectoryPort
from ..prompts import persona_prompt, summary_prompt
from .composer import AnswerComposer

STOP_PROMPT = (
    "Which stop are you at? Tell me the code on the stop flag, like A4, "
    "or share your location and I'll find the nearest stop."
)
LOCATION_PROMPT = (
    "I need your location to find live buses near you. "
    "Please allow location access and ask again."
)
DESTINATION_PROMPT = (
    "Where would you like to go? Tell me your destination and I'll look it up."
)
FARE_PROMPT = (
    "Where are you travelling to? Tell me your destination and I'll check the fare."
)
ORIGIN_PROMPT = (
    "Where are you starting from? Share your location or tell me "
    "where you're travelling from."
)
WEATHER_PROMPT = "Which town or city would you like the weather for?"

StageCall = Callable[[], GatewayResult]


@dataclass(frozen=True)
class Stage:
    """One step of the fallback chain.

    Attributes:
        name: 'primary', 'web_search' or 'llm'
        intent: Intent used to compose this stage's result
        source: Gateway name, for logs
        call: Zero-argument gateway invocation
    """

    name: str
    intent: Intent
    source: str
    call: StageCall


@dataclass
class Dispatcher:
    """Main service answering transit questions.

    Attributes:
        classifier: Ranks the intents of a question
        stops: Static StopReference table
        departures: Live departures and nearby stops
        live_vehicles: Real-time vehicle positions
        fares: Fare lookup
        journeys: Journey planning
        weather: Current weather
        web_search: Generic web search
        llm: Chat completion, the last stage of every chain
        geocoder: Geocoding Cache for place names and reverse lookups
        composer: Renders the final Answer
        summarise_search: Post-process web search hits with the LLM
    """

    classifier: IntentClassifierPort
    stops: StopDirectoryPort
    departures: DepartureGatewayPort
    live_vehicles: LiveVehicleGatewayPort
    fares: FareGatewayPort
    journeys: JourneyGatewayPort
    weather: WeatherGatewayPort
    web_search: WebSearchGatewayPort
    llm: LLMGatewayPort
    geocoder: Optional[GeocoderPort] = None
    composer: AnswerComposer = field(default_factory=AnswerComposer)
    llm_config: LLMConfig = field(default_factory=lambda: get_config().llm)
    stops_config: StopsConfig = field(default_factory=lambda: get_config().stops)
    summarise_search: bool = True

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def answer(self, question: Question) -> Answer:
        """Answer one question. Never raises.

        Args:
            question: Inbound question with optional location.

        Returns:
            Exactly one Answer; the apology if anything unexpected broke.
        """
        try:
            return self._answer(question)
        except Exception:
            self._logger.exception(
                "Unhandled error while answering",
                extra={"question_length": len(question.text or "")},
            )
            return self.composer.apology()

    def ask(
        self,
        text: Optional[str],
        lat: Optional[object] = None,
        lon: Optional[object] = None,
    ) -> Answer:
        """Convenience wrapper building the Question from raw request values."""
        return self.answer(
            Question(text=text or "", location=GeoLocation.parse(lat, lon))
        )

    def _answer(self, question: Question) -> Answer:
        if question.is_empty:
            self._logger.debug("Empty question, greeting")
            return self.composer.greeting()

        intents = self.classifier.classify(question.text)
        intent = intents[0]
        self._logger.info(
            "Question classified",
            extra={"intent": intent.name, "has_location": question.location is not None},
        )

        try:
            primary = self._plan_primary(intent, question)
        except InputError as e:
            self._logger.info(
                "Missing parameter, asking back",
                extra={"intent": intent.name, "parameter": e.parameter},
            )
            return self.composer.clarify(e)

        stages = self._plan_fallbacks(question)
        if primary is not None:
            stages.insert(0, primary)
        return self._run_chain(stages)

    # ------------------------------------------------------------------
    # Fallback chain
    # ------------------------------------------------------------------

    def _run_chain(self, stages: List[Stage]) -> Answer:
        last: Optional[tuple[Stage, GatewayResult]] = None
        for stage in stages:
            result = self._run_stage(stage)
            if isinstance(result, Success):
                answer = self.composer.render(result)
                if answer is not None:
                    return answer
                self._logger.info(
                    "Result has nothing to say, advancing",
                    extra={"stage": stage.name, "gateway": stage.source},
                )
                result = Empty(source=result.source, reason="nothing to render")
            last = (stage, result)

        if last is None:
            return self.composer.apology()
        stage, result = last
        return self.composer.compose(stage.intent, result)

    def _run_stage(self, stage: Stage) -> GatewayResult:
        self._logger.debug(
            "Calling gateway", extra={"stage": stage.name, "gateway": stage.source}
        )
        try:
            result = stage.call()
        except ConfigMissing as e:
            self._logger.debug(
                "Gateway disabled",
                extra={
                    "stage": stage.name,
                    "gateway": stage.source,
                    "setting": e.setting_name,
                },
            )
            return Failure(source=stage.source, reason=str(e), error=e)
        except TransiError as e:
            self._logger.warning(
                "Gateway failed",
                extra={"stage": stage.name, "gateway": stage.source, "error": str(e)},
            )
            return Failure(source=stage.source, reason=str(e), error=e)
        except Exception as e:
            self._logger.warning(
                "Gateway raised unexpectedly",
                extra={"stage": stage.name, "gateway": stage.source},
                exc_info=True,
            )
            return Failure(source=stage.source, reason=repr(e), error=e)

        self._logger.info(
            "Gateway answered",
            extra={
                "stage": stage.name,
                "gateway": stage.source,
                "outcome": type(result).__name__,
            },
        )
        return result

    def _plan_fallbacks(self, question: Question) -> List[Stage]:
        return [
            Stage(
                "web_search",
                Intent.GENERAL,
                self.web_search.name,
                lambda: self._search(question),
            ),
            Stage("llm", Intent.GENERAL, self.llm.name, lambda: self._complete(question)),
        ]

    def _search(self, question: Question) -> GatewayResult:
        result = self.web_search.fetch(question.text)
        if not isinstance(result, Success):
            return result
        if not (self.summarise_search and self.llm.enabled):
            return result
        summary = self._summarise(question.text, result.payload)
        if summary is None:
            return result
        payload = dataclasses.replace(result.payload, summary=summary)
        return Success(payload, source=result.source)

    def _summarise(self, question_text: str, search: SearchResult) -> Optional[str]:
        prompt = summary_prompt(question_text, search.snippet_text, search.page_excerpt)
        try:
            result = self.llm.fetch(
                None,
                prompt,
                max_tokens=self.llm_config.summary_max_tokens,
                temperature=self.llm_config.summary_temperature,
            )
        except TransiError as e:
            self._logger.warning("Search summary failed", extra={"error": str(e)})
            return None
        if isinstance(result, Success) and isinstance(result.payload, Completion):
            return result.payload.text
        return None

    def _complete(self, question: Question) -> GatewayResult:
        question = self._with_place_name(question)
        return self.llm.fetch(persona_prompt(question), question.text)

    def _with_place_name(self, question: Question) -> Question:
        if question.location is None or question.place_name or self.geocoder is None:
            return question
        place = self.geocoder.reverse_geocode(question.location)
        if place is None:
            return question
        return dataclasses.replace(question, place_name=place.name)

    # ------------------------------------------------------------------
    # Primary stage planning
    # ------------------------------------------------------------------

    def _plan_primary(self, intent: Intent, question: Question) -> Optional[Stage]:
        """Resolve the parameters of the top intent.

        Returns:
            The primary Stage, or None when the intent has no structured
            gateway or a parameter could not be resolved.

        Raises:
            InputError: A required parameter is missing from the question.
        """
        planners = {
            Intent.LIVE_DEPARTURES: self._plan_departures,
            Intent.LIVE_VEHICLE_POSITIONS: self._plan_live_vehicles,
            Intent.FARE_LOOKUP: self._plan_fare,
            Intent.JOURNEY_PLANNING: self._plan_journey,
            Intent.WEATHER_LOOKUP: self._plan_weather,
        }
        planner = planners.get(intent)
        if planner is None:
            return None
        call = planner(question)
        if call is None:
            self._logger.info(
                "Parameter unresolvable, skipping primary", extra={"intent": intent.name}
            )
            return None
        gateway = {
            Intent.LIVE_DEPARTURES: self.departures,
            Intent.LIVE_VEHICLE_POSITIONS: self.live_vehicles,
            Intent.FARE_LOOKUP: self.fares,
            Intent.JOURNEY_PLANNING: self.journeys,
            Intent.WEATHER_LOOKUP: self.weather,
        }[intent]
        return Stage("primary", intent, gateway.name, call)

    def _plan_departures(self, question: Question) -> Optional[StageCall]:
        stop = self.stops.find_in_text(question.text)
        if stop is None and question.location is not None:
            max_km = self.stops_config.nearest_max_km
            nearest = self.stops.nearest(question.location, max_km)
            if nearest is not None:
                stop = nearest[0]
            else:
                location = question.location
                return lambda: self._departures_near(location)
        if stop is None:
            raise InputError("no stop in question", parameter="stop", prompt=STOP_PROMPT)
        return self._departures_at(stop)

    def _departures_at(self, stop: StopReference) -> StageCall:
        return lambda: self.departures.fetch(stop.atco_code, stop_name=stop.name)

    def _departures_near(self, location: GeoLocation) -> GatewayResult:
        nearby = self.departures.nearby(location)
        if not isinstance(nearby, Success):
            return nearby
        candidates: tuple[NearbyStop, ...] = nearby.payload
        closest = next((s for s in candidates if s.is_bus_stop), None)
        if closest is None:
            return Empty(source=self.departures.name, reason="no bus stop nearby")
        return self.departures.fetch(closest.id, stop_name=closest.name)

    def _plan_live_vehicles(self, question: Question) -> Optional[StageCall]:
        if question.location is None:
            raise InputError("no location", parameter="location", prompt=LOCATION_PROMPT)
        location = question.location
        return lambda: self.live_vehicles.fetch(location)

    def _plan_fare(self, question: Question) -> Optional[StageCall]:
        destination = extract_destination(question.text)
        origin = extract_origin(question.text)
        line = extract_line(question.text)
        if not (destination or origin or line):
            raise InputError(
                "no destination", parameter="destination", prompt=FARE_PROMPT
            )
        return lambda: self.fares.fetch(destination=destination, origin=origin, line=line)

    def _plan_journey(self, question: Question) -> Optional[StageCall]:
        destination_text = extract_destination(question.text)
        if not destination_text:
            raise InputError(
                "no destination", parameter="destination", prompt=DESTINATION_PROMPT
            )
        origin_text = extract_origin(question.text)
        if origin_text is None and question.location is None:
            raise InputError("no origin", parameter="origin", prompt=ORIGIN_PROMPT)

        destination = self._geocode(destination_text)
        if destination is None:
            return None
        if origin_text is not None:
            origin_place = self._geocode(origin_text)
            if origin_place is None:
                return None
            origin = origin_place.location
        else:
            origin = question.location  # type: ignore[assignment]
        return lambda: self.journeys.fetch(origin, destination)

    def _plan_weather(self, question: Question) -> Optional[StageCall]:
        place_text = extract_place(question.text)
        if place_text:
            place = self._geocode(place_text)
            if place is None:
                return None
            return lambda: self.weather.fetch(place.location, place_name=place.name)
        if question.location is None:
            raise InputError("no place", parameter="location", prompt=WEATHER_PROMPT)
        location = question.location
        return lambda: self.weather.fetch(location, place_name=question.place_name)

    def _geocode(self, text: str) -> Optional[Place]:
        if self.geocoder is None:
            return None
        return self.geocoder.geocode(text)

    # ------------------------------------------------------------------
    # Stop resolution for the HTTP endpoints
    # ------------------------------------------------------------------

    def resolve_stop(self, code: str) -> tuple[str, Optional[str]]:
        """Map a short stop code or a raw ATCO code to (atco_code, name).

        Raises:
            InputError: The code is blank.
        """
        if not code or not code.strip():
            raise InputError("stop code is empty", parameter="stop", prompt=STOP_PROMPT)
        stop = self.stops.lookup(code)
        if stop is not None:
            return stop.atco_code, stop.name
        return code.strip(), None
