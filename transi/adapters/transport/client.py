"""Authenticated access to TransportAPI, shared by the transport gateways."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ...config import TransportApiConfig, get_config
from ...domain.errors import ConfigMissing, UpstreamMalformed
from ..http import HttpClient

M = TypeVar("M", bound=BaseModel)


@dataclass
class TransportApiClient:
    """Adds credentials to TransportAPI calls and validates responses.

    Attributes:
        config: TransportAPI configuration
        http: Shared HTTP client
    """

    config: TransportApiConfig = field(default_factory=lambda: get_config().transport)
    http: HttpClient = field(default_factory=HttpClient)

    @property
    def enabled(self) -> bool:
        return self.config.enabled

    def require_enabled(self, gateway: str) -> None:
        """Raise ConfigMissing if credentials are absent."""
        if not self.config.enabled:
            raise ConfigMissing(
                f"{gateway} disabled: TransportAPI credentials not configured",
                gateway=gateway,
                setting_name="TRANSPORT_API_ID/TRANSPORT_API_KEY",
            )

    def get(
        self,
        url_or_path: str,
        schema: Type[M],
        *,
        gateway: str,
        params: Optional[Mapping[str, Any]] = None,
    ) -> M:
        """GET an endpoint with credentials and parse it into `schema`.

        Raises:
            ConfigMissing: If credentials are absent.
            UpstreamUnavailable: On network / HTTP failure.
            UpstreamMalformed: If the body does not match the schema.
        """
        self.require_enabled(gateway)
        if url_or_path.startswith(("http://", "https://")):
            url = url_or_path
        else:
            url = f"{self.config.base_url.rstrip('/')}/{url_or_path.lstrip('/')}"

        query = dict(params or {})
        query["app_id"] = self.config.app_id
        query["app_key"] = self.config.app_key

        body = self.http.get_json(url, gateway=gateway, params=query)
        try:
            return schema.model_validate(body)
        except ValidationError as e:
            raise UpstreamMalformed(
                f"{gateway} payload did not match {schema.__name__}",
                gateway=gateway,
                cause=e,
            )
