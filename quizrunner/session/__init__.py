"""
Quiz session state machine.
"""

from .controller import Action, AnswerResult, QuestionView, SessionController, SessionPhase

__all__ = [
    "Action",
    "AnswerResult",
    "QuestionView",
    "SessionController",
    "SessionPhase",
]
