"""Adapters layer - Concrete implementations of ports.

This package connects the dispatcher to external systems:
- Transport data (TransportAPI departures, stops, journeys, fares)
- Live vehicle feeds (SIRI-VM, GTFS-realtime)
- Weather (OpenWeatherMap)
- Web search (Google Custom Search)
- LLM chat completion (OpenAI-compatible)
- Geocoding (Nominatim)
- The static stop table (CSV)
- Caching (in-memory, null)
"""
