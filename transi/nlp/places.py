"""Pull place names and route numbers out of free-text questions.

These are deliberately shallow pattern matches: the place strings they
return are handed to the geocoder, which does the real disambiguation.
"""

from __future__ import annotations

import re
from typing import Optional

_PUNCTUATION_RE = re.compile(r"[?.!,;]")
_TRAILING_RE = re.compile(
    r"\s+(?:from|by|via|on|at|please|today|tomorrow|tonight|now|this|later"
    r"|right now|in the)\b.*$",
    re.IGNORECASE,
)
_ARTICLE_RE = re.compile(r"^(?:the|a)\s+", re.IGNORECASE)

_TO_RE = re.compile(r"\b(?:to|towards)\s+", re.IGNORECASE)
_FROM_RE = re.compile(r"\bfrom\s+(?P<place>.+?)(?=\s+(?:to|towards)\b|$)", re.IGNORECASE)
_IN_RE = re.compile(r"\b(?:in|at|for|near|around)\s+", re.IGNORECASE)
_LINE_RE = re.compile(
    r"\b(?:bus|route|line|number|no\.?)\s+(?P<line>\d{1,3}[a-z]?)\b", re.IGNORECASE
)
_BARE_LINE_RE = re.compile(r"\b(?P<line>\d{1,3}[a-z]?)\b", re.IGNORECASE)

_NOT_PLACES = frozenset(
    "me here there home go get it my today tomorrow tonight now"
    " morning afternoon evening moment weekend".split()
)


def _clean(candidate: str) -> Optional[str]:
    candidate = _PUNCTUATION_RE.split(candidate, maxsplit=1)[0]
    candidate = _TRAILING_RE.sub("", candidate.strip())
    candidate = _ARTICLE_RE.sub("", candidate).strip()
    if not candidate or candidate.lower() in _NOT_PLACES:
        return None
    if candidate[0].isdigit():
        return None
    return candidate


def extract_destination(text: str) -> Optional[str]:
    """Return the place after the last "to"/"towards" in the text.

    Example:
        >>> extract_destination("How do I get to Exeter from Plymouth?")
        'Exeter'
        >>> extract_destination("I want to go to the Barbican")
        'Barbican'
    """
    matches = list(_TO_RE.finditer(text))
    if not matches:
        return None
    return _clean(text[matches[-1].end():])


def extract_origin(text: str) -> Optional[str]:
    """Return the place after "from", stopping at a following "to"."""
    match = _FROM_RE.search(text)
    if match is None:
        return None
    return _clean(match.group("place"))


def extract_place(text: str) -> Optional[str]:
    """Return the place a weather-style question is about ("in Exeter")."""
    for match in _IN_RE.finditer(text):
        place = _clean(text[match.end():])
        if place:
            return place
    return None


def extract_line(text: str) -> Optional[str]:
    """Return a bus route number mentioned in the text, if any."""
    match = _LINE_RE.search(text) or _BARE_LINE_RE.search(text)
    return match.group("line").upper() if match else None
