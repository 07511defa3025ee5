"""Services layer - Application orchestration.

Available services:
- Dispatcher: classifier -> gateways -> composer with the fallback chain
- AnswerComposer: pure rendering of gateway results into Answers
"""

from .composer import APOLOGY, GREETING, NO_DATA, AnswerComposer
from .dispatcher import Dispatcher, Stage

__all__ = ["Dispatcher", "Stage", "AnswerComposer", "GREETING", "APOLOGY", "NO_DATA"]
