"""
Question record model and shape validation.

Question files are a flat JSON list of records:

    [
      {
        "id": "q1",
        "category": "Monitoring",
        "question": "Which service ...?",
        "options": {"A": "...", "B": "..."},
        "answer": "A",
        "explanation": "..."
      }
    ]
"""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, model_validator

from quizrunner.core.errors import LoadError


class Question(BaseModel):
    """A single multiple-choice question. Immutable once loaded."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(..., min_length=1, description="Unique question identifier")
    category: str = Field(..., description="Grouping key used by the category filter")
    prompt: str = Field(
        ...,
        validation_alias=AliasChoices("question", "prompt"),
        description="Question text",
    )
    options: dict[str, str] = Field(
        ...,
        min_length=1,
        description="Option key -> option text, in presentation order",
    )
    correct_key: str = Field(
        ...,
        validation_alias=AliasChoices("answer", "correctKey", "correct_key"),
        description="Key of the correct option",
    )
    explanation: str = ""

    @model_validator(mode="after")
    def _correct_key_is_an_option(self) -> Question:
        if self.correct_key not in self.options:
            raise ValueError(
                f"correct key {self.correct_key!r} is not one of the options {list(self.options)}"
            )
        return self

    def is_correct(self, key: str) -> bool:
        """Check whether an option key is the correct answer."""
        return key == self.correct_key


def parse_questions(data: Any, source: str | None = None) -> list[Question]:
    """
    Validate a decoded question file.

    Args:
        data: Decoded JSON payload (must be a list of records)
        source: Where the payload came from, for error messages

    Returns:
        Questions in file order

    Raises:
        LoadError: If the payload is not a list, a record fails validation,
            or two records share an id. No partial list is returned.
    """
    if not isinstance(data, list):
        raise LoadError(
            f"Question data must be a list, got {type(data).__name__}", source
        )

    questions: list[Question] = []
    seen_ids: set[str] = set()
    for index, record in enumerate(data):
        try:
            question = Question.model_validate(record)
        except ValidationError as e:
            raise LoadError(f"Invalid question at index {index}: {e}", source) from e

        if question.id in seen_ids:
            raise LoadError(f"Duplicate question id {question.id!r} at index {index}", source)
        seen_ids.add(question.id)
        questions.append(question)

    return questions


def derive_categories(questions: list[Question]) -> list[str]:
    """Sorted, de-duplicated categories of a question list."""
    return sorted({q.category for q in questions})
