"""Text analysis: intent rules and place extraction."""

from .intent import RULES, IntentRule, detect_intents, normalize
from .places import extract_destination, extract_line, extract_origin, extract_place

__all__ = [
    "RULES",
    "IntentRule",
    "detect_intents",
    "normalize",
    "extract_destination",
    "extract_line",
    "extract_origin",
    "extract_place",
]
