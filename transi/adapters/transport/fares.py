"""Fare gateway - cheapest fare from the configured fares endpoint.

The endpoint is expected to answer with ``{"fares": [{"name", "price",
"currency"}]}``. Without a configured ``fares_url`` the gateway stays
disabled and fare questions go to web search.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Union

from ...domain.errors import ConfigMissing
from ...domain.models import Empty, FareQuote, GatewayResult, Success
from .client import TransportApiClient
from .schemas import FaresResponse


def parse_price(value: Union[float, str]) -> Optional[float]:
    """Read a price given as a number or a string such as '£2.50'."""
    if isinstance(value, (int, float)):
        return float(value)
    text = value.strip().lstrip("£$€").replace(",", "")
    try:
        return float(text)
    except ValueError:
        return None


@dataclass
class TransportApiFareGateway:
    """Cheapest fare lookup.

    This adapter implements FareGatewayPort.
    """

    client: TransportApiClient = field(default_factory=TransportApiClient)
    name: str = "fares"
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    @property
    def enabled(self) -> bool:
        return self.client.config.fares_enabled

    def fetch(
        self,
        destination: Optional[str] = None,
        origin: Optional[str] = None,
        line: Optional[str] = None,
    ) -> GatewayResult:
        fares_url = self.client.config.fares_url
        if not fares_url:
            raise ConfigMissing(
                "fares disabled: no fares endpoint configured",
                gateway=self.name,
                setting_name="TRANSI_TRANSPORT_FARES_URL",
            )

        params = {
            key: value
            for key, value in (("from", origin), ("to", destination), ("line", line))
            if value
        }
        response = self.client.get(
            fares_url, FaresResponse, gateway=self.name, params=params
        )

        quotes = []
        for item in response.fares:
            price = parse_price(item.price)
            if price is None or price < 0:
                continue
            quotes.append(FareQuote(name=item.name, price=price, currency=item.currency))

        if not quotes:
            return Empty(source=self.name, reason="no fares")
        cheapest = min(quotes, key=lambda q: q.price)
        self._logger.info(
            "Fare found",
            extra={"fare": cheapest.name, "price": cheapest.price},
        )
        return Success(cheapest, source=self.name)
