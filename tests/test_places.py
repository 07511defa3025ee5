"""Tests for place and route-number extraction."""

import pytest

from transi.nlp.places import (
    extract_destination,
    extract_line,
    extract_origin,
    extract_place,
)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("How do I get to Exeter from Plymouth?", "Exeter"),
        ("I want to go to the Barbican", "Barbican"),
        ("ticket to Tavistock please", "Tavistock"),
        ("from Exeter to Plymouth Railway Station", "Plymouth Railway Station"),
        ("how much is a ticket", None),
        ("how do I get to me", None),
    ],
)
def test_extract_destination(text, expected):
    assert extract_destination(text) == expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("from Exeter to Plymouth", "Exeter"),
        ("How do I get to Exeter from the Barbican?", "Barbican"),
        ("next bus from A4", "A4"),
        ("to Exeter", None),
    ],
)
def test_extract_origin(text, expected):
    assert extract_origin(text) == expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("What's the weather in Exeter?", "Exeter"),
        ("weather at 5pm in Torquay", "Torquay"),
        ("is it raining in the city centre today", "city centre"),
        ("weather for tomorrow", None),
        ("what's the weather like", None),
    ],
)
def test_extract_place(text, expected):
    assert extract_place(text) == expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("how much is the number 21a", "21A"),
        ("when does bus 43 leave", "43"),
        ("when is the next 12 coming", "12"),
        ("next bus from A4", None),
    ],
)
def test_extract_line(text, expected):
    assert extract_line(text) == expected
