"""Typed domain errors for the Transi assistant.

Gateways raise these instead of leaking `requests` or parser exceptions;
the dispatcher turns them into `Failure` results and advances the
fallback chain. None of them is ever fatal to the process.

All errors inherit from TransiError and can optionally wrap a root cause
exception for debugging.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class TransiError(Exception):
    """Base error for the assistant domain.

    Attributes:
        message: Human-readable error description
        cause: Optional underlying exception that caused this error
    """

    message: str
    cause: Optional[Exception] = field(default=None, repr=False)

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def __post_init__(self) -> None:
        super().__init__(self.message)


@dataclass
class InputError(TransiError):
    """A required request parameter is missing.

    Answered with a clarifying prompt rather than an HTTP error.

    Attributes:
        parameter: Name of the missing parameter (e.g. 'stop', 'location')
        prompt: Clarifying question to put back to the user
    """

    parameter: str = ""
    prompt: str = ""


@dataclass
class UpstreamUnavailable(TransiError):
    """Network error, timeout or non-2xx response from a gateway.

    Attributes:
        gateway: Name of the gateway that failed
        status_code: HTTP status if the upstream answered
        is_timeout: Whether the call hit the client timeout
    """

    gateway: str = ""
    status_code: Optional[int] = None
    is_timeout: bool = False


@dataclass
class UpstreamMalformed(TransiError):
    """Upstream payload could not be decoded or failed schema validation.

    Attributes:
        gateway: Name of the gateway whose payload was rejected
    """

    gateway: str = ""


@dataclass
class ConfigMissing(TransiError):
    """A gateway is disabled because a credential is absent.

    Attributes:
        gateway: Name of the disabled gateway
        setting_name: Environment setting that would enable it
    """

    gateway: str = ""
    setting_name: str = ""

