"""CSV stop directory adapter.

Loads the StopReference table (short stop-flag codes such as 'A4' mapped
to national stop identifiers) once, then serves lookups from memory. The
table is never mutated after loading, so it is safe to share across
request threads.
"""

from __future__ import annotations

import csv
import logging
import re
from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence

from ...config import StopsConfig, get_config
from ...domain.errors import ConfigMissing
from ...domain.models import GeoLocation, StopReference
from ...geo import haversine_km

_TOKEN_RE = re.compile(r"[a-z0-9]+")


@dataclass
class CSVStopDirectory:
    """Stop table backed by a CSV file.

    Expected columns: code, atco_code, name, lat, lon.

    Attributes:
        config: Stops configuration (file path, nearest-stop radius)
    """

    config: StopsConfig = field(default_factory=lambda: get_config().stops)
    _logger: logging.Logger = field(init=False, repr=False)
    _stops: Optional[Dict[str, StopReference]] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def _load(self) -> Dict[str, StopReference]:
        if self._stops is not None:
            return self._stops

        stops: Dict[str, StopReference] = {}
        try:
            with self.config.stops_file.open(encoding="utf-8") as f:
                for row in csv.DictReader(f):
                    code = (row.get("code") or "").strip()
                    atco = (row.get("atco_code") or "").strip()
                    if not code or not atco:
                        continue
                    try:
                        location = GeoLocation(
                            latitude=float(row.get("lat") or ""),
                            longitude=float(row.get("lon") or ""),
                        )
                    except ValueError:
                        self._logger.warning(
                            "Skipping stop with bad coordinates",
                            extra={"code": code},
                        )
                        continue
                    stops[code.lower()] = StopReference(
                        code=code.upper(),
                        atco_code=atco,
                        name=(row.get("name") or "").strip() or code.upper(),
                        location=location,
                    )
        except OSError as e:
            raise ConfigMissing(
                f"Stop table unreadable: {self.config.stops_file}",
                gateway="stops",
                setting_name="TRANSI_STOPS_STOPS_FILE",
                cause=e,
            )

        self._logger.info("Stop table loaded", extra={"stops": len(stops)})
        self._stops = stops
        return stops

    def lookup(self, code: str) -> Optional[StopReference]:
        return self._load().get(code.strip().lower())

    def codes(self) -> frozenset[str]:
        return frozenset(self._load())

    def find_in_text(self, text: str) -> Optional[StopReference]:
        """Return the first known stop code mentioned as a whole word."""
        stops = self._load()
        for token in _TOKEN_RE.findall(text.lower()):
            if token in stops:
                return stops[token]
        return None

    def nearest(
        self, location: GeoLocation, max_km: Optional[float] = None
    ) -> Optional[tuple[StopReference, float]]:
        """Closest stop by great-circle distance, if within max_km."""
        limit = self.config.nearest_max_km if max_km is None else max_km
        best: Optional[tuple[StopReference, float]] = None
        for stop in self._load().values():
            distance = haversine_km(
                location.latitude,
                location.longitude,
                stop.location.latitude,
                stop.location.longitude,
            )
            if best is None or distance < best[1]:
                best = (stop, distance)
        if best is None or best[1] > limit:
            return None
        return best

    def list_stops(self) -> Sequence[StopReference]:
        return list(self._load().values())
