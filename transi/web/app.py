"""FastAPI application factory."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..container import Container, get_container
from ..domain.errors import InputError, TransiError
from .routes import router

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Map domain errors raised by the /api/* routes to JSON bodies."""

    @app.exception_handler(InputError)
    async def input_error_handler(request: Request, exc: InputError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": exc.message})

    @app.exception_handler(TransiError)
    async def upstream_error_handler(
        request: Request, exc: TransiError
    ) -> JSONResponse:
        logger.warning(
            "Upstream error on data endpoint",
            extra={"path": request.url.path, "error": str(exc)},
        )
        return JSONResponse(status_code=502, content={"error": exc.message})


def create_app(container: Optional[Container] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        container: DI container; the process-wide default when omitted.
    """
    container = container or get_container()
    app = FastAPI(
        title="Transi Autopilot",
        version=container.config.version,
        description="Conversational transit information for Plymouth & the South West",
    )
    app.state.container = container

    register_error_handlers(app)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router)
    return app
