"""Search adapters - Implementations of WebSearchGatewayPort.

Available implementations:
- GoogleSearchGateway: Google Custom Search JSON API with page excerpts
"""

from .google_adapter import GoogleSearchGateway

__all__ = ["GoogleSearchGateway"]
