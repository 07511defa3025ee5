"""Run the HTTP service: `python -m transi`."""

from __future__ import annotations

import logging

import uvicorn

from .config import get_config
from .logging_setup import configure_logging
from .web import create_app


def main() -> None:
    config = get_config()
    configure_logging(config.observability)
    logging.getLogger(__name__).info(
        "Transi Autopilot starting",
        extra={"host": config.server.host, "port": config.server.port},
    )
    uvicorn.run(
        create_app(),
        host=config.server.host,
        port=config.server.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
