"""NLP ports - Abstractions for intent classification."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..domain.models import Intent


class IntentClassifierPort(Protocol):
    """Port for intent classification.

    Implementation: adapters/nlp/intent_adapter.py (rules table in
    nlp/intent.py).
    """

    def classify(self, question: str) -> tuple[Intent, ...]:
        """Rank the candidate intents of a question.

        Args:
            question: Raw question text.

        Returns:
            Non-empty tuple of intents, most likely first. GENERAL is
            always present as the last resort.
        """
        ...
