"""Live vehicle feed decoders.

Two feed formats are understood and normalized to the same shape:
- SIRI-VM XML, as served by the UK Bus Open Data Service datafeed
- GTFS-realtime protobuf vehicle positions

Decoders only read positions; distance filtering happens in the gateway.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from google.protobuf.message import DecodeError
from google.transit import gtfs_realtime_pb2

from ...domain.errors import UpstreamMalformed


@dataclass(frozen=True, slots=True)
class VehicleSighting:
    """Raw decoded position, before distance filtering."""

    vehicle_id: str
    line: str
    latitude: float
    longitude: float
    bearing: Optional[float] = None


def _as_float(text: Optional[str]) -> Optional[float]:
    if text is None or not text.strip():
        return None
    try:
        return float(text)
    except ValueError:
        return None


def decode_siri_vm(payload: bytes) -> List[VehicleSighting]:
    """Decode a SIRI-VM document.

    Activities without a usable position are skipped.

    Raises:
        UpstreamMalformed: If the payload is not well-formed XML.
    """
    try:
        root = ET.fromstring(payload)
    except ET.ParseError as e:
        raise UpstreamMalformed("live feed is not valid XML", gateway="live", cause=e)

    sightings: List[VehicleSighting] = []
    for activity in root.iterfind(".//{*}VehicleActivity"):
        journey = activity.find("{*}MonitoredVehicleJourney")
        if journey is None:
            continue
        lat = _as_float(journey.findtext("{*}VehicleLocation/{*}Latitude"))
        lon = _as_float(journey.findtext("{*}VehicleLocation/{*}Longitude"))
        if lat is None or lon is None:
            continue
        line = (
            journey.findtext("{*}PublishedLineName")
            or journey.findtext("{*}LineRef")
            or ""
        ).strip()
        vehicle_id = (journey.findtext("{*}VehicleRef") or "").strip()
        sightings.append(
            VehicleSighting(
                vehicle_id=vehicle_id or f"{line}@{lat:.5f},{lon:.5f}",
                line=line,
                latitude=lat,
                longitude=lon,
                bearing=_as_float(journey.findtext("{*}Bearing")),
            )
        )
    return sightings


def decode_gtfs_rt(payload: bytes) -> List[VehicleSighting]:
    """Decode a GTFS-realtime FeedMessage.

    Raises:
        UpstreamMalformed: If the payload is not a valid FeedMessage.
    """
    feed = gtfs_realtime_pb2.FeedMessage()
    try:
        feed.ParseFromString(payload)
    except DecodeError as e:
        raise UpstreamMalformed(
            "live feed is not a GTFS-realtime message", gateway="live", cause=e
        )

    sightings: List[VehicleSighting] = []
    for entity in feed.entity:
        if not entity.HasField("vehicle"):
            continue
        vehicle = entity.vehicle
        if not vehicle.HasField("position"):
            continue
        position = vehicle.position
        descriptor_id = vehicle.vehicle.id or vehicle.vehicle.label
        sightings.append(
            VehicleSighting(
                vehicle_id=descriptor_id or entity.id,
                line=vehicle.trip.route_id,
                latitude=position.latitude,
                longitude=position.longitude,
                bearing=position.bearing if position.HasField("bearing") else None,
            )
        )
    return sightings


DECODERS: Dict[str, Callable[[bytes], List[VehicleSighting]]] = {
    "siri_vm": decode_siri_vm,
    "gtfs_rt": decode_gtfs_rt,
}
