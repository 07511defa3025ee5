"""Intent classification adapter.

Wraps the rules table from nlp/intent.py with the IntentClassifierPort
interface and feeds it the short codes of the stop directory.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import AbstractSet

from ...domain.models import Intent
from ...nlp.intent import detect_intents


@dataclass
class RuleBasedIntentClassifier:
    """Rule-based intent classifier.

    Attributes:
        stop_codes: Known short stop codes, lower-cased
    """

    stop_codes: AbstractSet[str] = frozenset()
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def classify(self, question: str) -> tuple[Intent, ...]:
        """Rank the candidate intents of a question.

        Args:
            question: Raw question text.

        Returns:
            Candidate intents, primary first, GENERAL last.
        """
        intents = detect_intents(question, self.stop_codes)
        self._logger.debug(
            "Intent classified",
            extra={
                "question_length": len(question),
                "intent": intents[0].name,
                "candidates": len(intents),
            },
        )
        return intents
