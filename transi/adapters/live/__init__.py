"""Live feed adapters - Implementations of LiveVehicleGatewayPort.

Available implementations:
- LiveFeedGateway: SIRI-VM XML or GTFS-realtime protobuf vehicle feed
"""

from .decoders import VehicleSighting, decode_gtfs_rt, decode_siri_vm
from .feed_adapter import MAX_VEHICLES, LiveFeedGateway

__all__ = [
    "LiveFeedGateway",
    "MAX_VEHICLES",
    "VehicleSighting",
    "decode_siri_vm",
    "decode_gtfs_rt",
]
