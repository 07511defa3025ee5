"""Shared HTTP client for all gateways.

Wraps a `requests.Session` with:
- One bounded timeout for every call (a gateway must never hang the
  dispatcher)
- A fixed User-Agent
- Translation of transport errors into domain errors:
  timeouts / connection errors / non-2xx -> UpstreamUnavailable,
  undecodable bodies -> UpstreamMalformed
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

import requests

from ..config import HttpConfig, get_config
from ..domain.errors import UpstreamMalformed, UpstreamUnavailable


@dataclass
class HttpClient:
    """Thin requests wrapper shared by the gateways.

    Attributes:
        config: HTTP configuration (timeout, user agent)
        session: Underlying session; injectable for tests
    """

    config: HttpConfig = field(default_factory=lambda: get_config().http)
    session: requests.Session = field(default_factory=requests.Session, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)
        self.session.headers.setdefault("User-Agent", self.config.user_agent)

    def request(
        self,
        method: str,
        url: str,
        *,
        gateway: str,
        params: Optional[Mapping[str, Any]] = None,
        json: Optional[Any] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> requests.Response:
        """Send a request and return the response if it is 2xx.

        Raises:
            UpstreamUnavailable: On timeout, connection error or non-2xx.
        """
        self._logger.debug(
            "Upstream request",
            extra={"gateway": gateway, "method": method, "url": url},
        )
        try:
            response = self.session.request(
                method,
                url,
                params=params,
                json=json,
                headers=dict(headers) if headers else None,
                timeout=self.config.timeout_seconds,
            )
        except requests.Timeout as e:
            raise UpstreamUnavailable(
                f"{gateway} timed out after {self.config.timeout_seconds}s",
                gateway=gateway,
                is_timeout=True,
                cause=e,
            )
        except requests.RequestException as e:
            raise UpstreamUnavailable(
                f"{gateway} request failed",
                gateway=gateway,
                cause=e,
            )

        if not 200 <= response.status_code < 300:
            raise UpstreamUnavailable(
                f"{gateway} answered HTTP {response.status_code}",
                gateway=gateway,
                status_code=response.status_code,
            )
        return response

    def get_json(
        self,
        url: str,
        *,
        gateway: str,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Any:
        """GET a URL and decode its JSON body."""
        response = self.request(
            "GET", url, gateway=gateway, params=params, headers=headers
        )
        return self._decode_json(response, gateway)

    def post_json(
        self,
        url: str,
        body: Any,
        *,
        gateway: str,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Any:
        """POST a JSON body and decode the JSON response."""
        response = self.request("POST", url, gateway=gateway, json=body, headers=headers)
        return self._decode_json(response, gateway)

    def get_bytes(
        self,
        url: str,
        *,
        gateway: str,
        params: Optional[Mapping[str, Any]] = None,
    ) -> bytes:
        """GET a URL and return the raw body (protobuf / XML feeds)."""
        return self.request("GET", url, gateway=gateway, params=params).content

    def get_text(self, url: str, *, gateway: str) -> str:
        """GET a URL and return the decoded body text (web pages)."""
        return self.request("GET", url, gateway=gateway).text

    @staticmethod
    def _decode_json(response: requests.Response, gateway: str) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise UpstreamMalformed(
                f"{gateway} returned a non-JSON body",
                gateway=gateway,
                cause=e,
            )
