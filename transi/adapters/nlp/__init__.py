"""NLP adapters."""

from .intent_adapter import RuleBasedIntentClassifier

__all__ = ["RuleBasedIntentClassifier"]
