"""Prompt builders for the LLM gateway."""

from __future__ import annotations

from typing import Optional

from .domain.models import Question

PERSONA = (
    "You are Transi Autopilot, an intelligent UK travel assistant for "
    "Plymouth & the South West.\n"
    "Provide clear, short, accurate travel help using UK English.\n"
    "Include useful hints about buses, trains, routes, or general area info."
)


def persona_prompt(question: Question) -> str:
    """System prompt for free-text answers, with the caller's location if known."""
    lines = [PERSONA]
    if question.location is not None:
        where = f"({question.location.latitude:.5f}, {question.location.longitude:.5f})"
        if question.place_name:
            where = f"{question.place_name} {where}"
        lines.append(
            f"The passenger is near {where}; reference local context briefly if possible."
        )
    elif question.place_name:
        lines.append(
            f"The passenger is near {question.place_name}; "
            "reference local context briefly if possible."
        )
    return "\n".join(lines)


def summary_prompt(question: str, snippets: str, excerpt: Optional[str] = None) -> str:
    """User prompt asking for a spoken-style answer grounded in search results."""
    material = snippets
    if excerpt:
        material = f"{snippets}\n\nPage extract:\n{excerpt}" if snippets else excerpt
    return (
        "You are Transi, a friendly British travel assistant.\n"
        f"Question: {question}\n"
        "Below are snippets from UK South West transport websites.\n"
        "Write a short spoken-style answer in plain English based only on them.\n"
        "Be concise, accurate, and sound like you're talking to a passenger.\n"
        "\n"
        f"Snippets:\n{material}"
    )
