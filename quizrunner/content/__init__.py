"""
Question loading: record model, validation and sources.
"""

from .models import Question, derive_categories, parse_questions
from .source import (
    FileQuestionSource,
    HttpQuestionSource,
    QuestionSource,
    StaticQuestionSource,
    open_source,
)

__all__ = [
    "Question",
    "parse_questions",
    "derive_categories",
    "QuestionSource",
    "StaticQuestionSource",
    "FileQuestionSource",
    "HttpQuestionSource",
    "open_source",
]
