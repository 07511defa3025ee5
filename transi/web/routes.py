"""HTTP routes: the /ask entry point, JSON data endpoints, voice and health."""

from __future__ import annotations

import logging
from typing import Any, Optional

import structlog
from fastapi import APIRouter, Depends, Form, Request, Response

from ..config import AppConfig
from ..domain.errors import InputError
from ..domain.models import GeoLocation, Question, Success
from ..services import Dispatcher
from .voice import render_twiml

logger = logging.getLogger(__name__)

router = APIRouter()


def get_dispatcher(request: Request) -> Dispatcher:
    return request.app.state.container.resolve(Dispatcher)


def get_app_config(request: Request) -> AppConfig:
    return request.app.state.container.config


def _require_location(lat: Optional[str], lon: Optional[str]) -> GeoLocation:
    location = GeoLocation.parse(lat, lon)
    if location is None:
        raise InputError(
            "Missing latitude or longitude",
            parameter="location",
            prompt="Missing latitude or longitude",
        )
    return location


@router.get("/ask")
def ask(
    q: Optional[str] = None,
    lat: Optional[str] = None,
    lon: Optional[str] = None,
    dispatcher: Dispatcher = Depends(get_dispatcher),
) -> dict[str, Any]:
    """Answer a free-text question. Always 200; a missing q gets the greeting."""
    answer = dispatcher.ask(q, lat, lon)
    body: dict[str, Any] = {"question": q or "", "answer": answer.text}
    if answer.data is not None:
        body["data"] = dict(answer.data)
    return body


@router.get("/api/nearby")
def nearby(
    lat: Optional[str] = None,
    lon: Optional[str] = None,
    dispatcher: Dispatcher = Depends(get_dispatcher),
) -> list[dict[str, Any]]:
    """Stops near a coordinate as a bare JSON array, nearest first."""
    location = _require_location(lat, lon)
    result = dispatcher.departures.nearby(location)
    stops = result.payload if isinstance(result, Success) else ()
    return [stop.as_dict() for stop in stops]


@router.get("/api/departures/{stop_code}")
def departures(
    stop_code: str,
    dispatcher: Dispatcher = Depends(get_dispatcher),
) -> dict[str, Any]:
    """Live departures for a short stop code (A4) or an ATCO code."""
    atco_code, stop_name = dispatcher.resolve_stop(stop_code)
    result = dispatcher.departures.fetch(atco_code, stop_name=stop_name)
    if isinstance(result, Success):
        return result.payload.as_dict()
    return {"atcocode": atco_code, "name": stop_name or atco_code, "departures": {}}


@router.get("/api/livebuses")
def live_buses(
    lat: Optional[str] = None,
    lon: Optional[str] = None,
    radius: Optional[float] = None,
    dispatcher: Dispatcher = Depends(get_dispatcher),
) -> dict[str, Any]:
    location = _require_location(lat, lon)
    result = dispatcher.live_vehicles.fetch(location, radius_km=radius)
    if isinstance(result, Success):
        return result.payload.as_dict()
    return {"buses": []}


@router.post("/voice")
def voice(
    speech_result: Optional[str] = Form(default=None, alias="SpeechResult"),
    call_sid: Optional[str] = Form(default=None, alias="CallSid"),
    dispatcher: Dispatcher = Depends(get_dispatcher),
    config: AppConfig = Depends(get_app_config),
) -> Response:
    """Telephony callback: speak the answer, then gather the next question."""
    telephony = config.telephony
    question = Question(
        text=speech_result or "",
        location=GeoLocation.parse(telephony.default_lat, telephony.default_lon),
    )
    with structlog.contextvars.bound_contextvars(call_sid=call_sid):
        answer = dispatcher.answer(question)
        logger.info("Voice turn answered", extra={"has_speech": bool(speech_result)})
    return Response(
        content=render_twiml(answer.text, telephony), media_type="application/xml"
    )


@router.get("/health")
def health(config: AppConfig = Depends(get_app_config)) -> dict[str, str]:
    return {"status": "ok", "service": "Transi Autopilot", "version": config.version}
