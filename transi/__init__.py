"""Transi Autopilot - conversational transit information assistant.

A free-text question (plus optional coordinates) is classified, routed to
one upstream data source, and answered with a short spoken-style sentence,
falling back to web search and then an LLM when the source has nothing.
"""

__version__ = "2.1"
