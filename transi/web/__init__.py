"""Web layer - FastAPI application serving /ask, /api/*, /voice and /health."""

from .app import create_app
from .voice import render_twiml

__all__ = ["create_app", "render_twiml"]
