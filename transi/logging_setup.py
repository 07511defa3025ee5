"""Logging configuration.

Components log through module-level stdlib loggers and pass context via
``extra={...}``. The root handler installed here formats every record
through a structlog processor chain, so those fields (and anything bound
with ``structlog.contextvars``) reach the output, either as console
``key=value`` pairs or as one JSON object per line.
"""

from __future__ import annotations

import logging
from typing import Optional

import structlog
from structlog.types import Processor

from .config import ObservabilityConfig, get_config

HANDLER_NAME = "transi"


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.ExtraAdder(),
        structlog.processors.TimeStamper(fmt="iso"),
    ]


def build_formatter(structured: bool) -> structlog.stdlib.ProcessorFormatter:
    """Formatter rendering stdlib records through the shared chain."""
    if structured:
        renderers: list[Processor] = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        renderers = [structlog.dev.ConsoleRenderer(colors=False)]

    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_shared_processors(),
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *renderers],
    )


def configure_logging(config: Optional[ObservabilityConfig] = None) -> None:
    """Install the root handler according to configuration.

    Safe to call more than once; the previous handler installed by this
    function is replaced.
    """
    config = config or get_config().observability
    level = config.level.upper()

    structlog.configure(
        processors=[
            *_shared_processors(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(build_formatter(config.structured))
    handler.set_name(HANDLER_NAME)

    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == HANDLER_NAME:
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)
